"""
Missing Address Validation Rule — setters and transfers taking Address parameters.

The check is naming based: any function whose name contains `set` or
`transfer` and that accepts an Address is reported once, whatever its body
does with the address.
"""

from __future__ import annotations

from gasguard.models.contract_models import ContractIR
from gasguard.models.rule_models import Severity, Violation


RULE_ID = "missing-address-validation"
DISPLAY_NAME = "Missing Address Validation"
DESCRIPTION = "Detects setter/transfer functions taking Address parameters that may lack validation"
SEVERITY = Severity.MEDIUM

NAME_MARKERS = ("set", "transfer")


def check(contract: ContractIR, usage: frozenset[str] | None = None) -> list[Violation]:
    violations: list[Violation] = []

    for func in contract.all_functions():
        if not any(marker in func.name for marker in NAME_MARKERS):
            continue
        if not any("Address" in p.type_name for p in func.parameters):
            continue
        violations.append(
            Violation(
                rule_id=RULE_ID,
                description=(
                    f"Function '{func.name}' takes Address parameter but may lack validation"
                ),
                severity=SEVERITY,
                line_number=func.line_number,
                column_number=func.column_number,
                subject_name=func.name,
                suggestion="Validate Address parameters to prevent invalid addresses",
            )
        )

    return violations
