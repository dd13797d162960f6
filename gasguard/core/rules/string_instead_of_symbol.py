"""
String Instead Of Symbol Rule — String-typed fields where a Symbol is usually cheaper.
"""

from __future__ import annotations

from gasguard.models.contract_models import ContractIR
from gasguard.models.rule_models import Severity, Violation


RULE_ID = "string-instead-of-symbol"
DISPLAY_NAME = "String Instead Of Symbol"
DESCRIPTION = "Detects String fields that could be stored as Symbol"
SEVERITY = Severity.INFO


def check(contract: ContractIR, usage: frozenset[str] | None = None) -> list[Violation]:
    violations: list[Violation] = []
    for field in contract.all_fields():
        if field.type_name != "String":
            continue
        violations.append(
            Violation(
                rule_id=RULE_ID,
                description=f"Field '{field.name}' uses String type",
                severity=SEVERITY,
                line_number=field.line_number,
                column_number=field.column_number,
                subject_name=field.name,
                suggestion="Consider using Symbol for fixed string values to save storage costs",
            )
        )
    return violations
