"""
Unused State Variable Rule — Flags contract fields never referenced outside their declaration.

Textual heuristic: a field whose name occurs at most once in the whole source
(the declaration itself) is considered unused. Every persisted field costs
ledger rent, so dead fields are a direct storage saving.
"""

from __future__ import annotations

from gasguard.models.contract_models import ContractIR
from gasguard.models.rule_models import Severity, Violation


RULE_ID = "unused-state-variable"
DISPLAY_NAME = "Unused State Variables"
DESCRIPTION = "Detects state variables that are declared but never used"
SEVERITY = Severity.WARNING


def check(contract: ContractIR, usage: frozenset[str] | None = None) -> list[Violation]:
    """Flag fields whose name appears at most once in the source text."""
    violations: list[Violation] = []

    for field in contract.all_fields():
        if contract.source_text.count(field.name) > 1:
            continue
        violations.append(
            Violation(
                rule_id=RULE_ID,
                description=f"State variable '{field.name}' appears to be unused",
                severity=SEVERITY,
                line_number=field.line_number,
                column_number=field.column_number,
                subject_name=field.name,
                suggestion=(
                    f"Remove unused state variable '{field.name}' to save ledger storage costs"
                ),
            )
        )

    return violations
