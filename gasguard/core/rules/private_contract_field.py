"""
Private Contract Field Rule — contract state fields declared without `pub`.
"""

from __future__ import annotations

from gasguard.models.contract_models import ContractIR, FieldVisibility
from gasguard.models.rule_models import Severity, Violation


RULE_ID = "private-contract-field"
DISPLAY_NAME = "Private Contract Field"
DESCRIPTION = "Detects contract state fields that are not public"
SEVERITY = Severity.WARNING


def check(contract: ContractIR, usage: frozenset[str] | None = None) -> list[Violation]:
    violations: list[Violation] = []
    for field in contract.all_fields():
        if field.visibility != FieldVisibility.PRIVATE:
            continue
        violations.append(
            Violation(
                rule_id=RULE_ID,
                description=(
                    f"Field '{field.name}' is private but contract fields should typically be public"
                ),
                severity=SEVERITY,
                line_number=field.line_number,
                column_number=field.column_number,
                subject_name=field.name,
                suggestion=f"Change '{field.name}' to 'pub {field.name}' to make it accessible",
            )
        )
    return violations
