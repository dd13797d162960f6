"""
Unused Field Usage Rule — grammar-accurate unused state variable detection.

Runs on the grammar engine: `usage` is the UsageSet collected from every
impl block targeting the contract struct, and a field is reported when
`is_field_used` finds no reference to it. Shares its id with the textual
heuristic so downstream storage estimates count both the same way.
"""

from __future__ import annotations

from gasguard.core.usage_analyzer import is_field_used
from gasguard.models.contract_models import ContractIR
from gasguard.models.rule_models import Severity, Violation


RULE_ID = "unused-state-variable"
DISPLAY_NAME = "Unused State Variables"
DESCRIPTION = "Detects contract struct fields never referenced by any impl block"
SEVERITY = Severity.WARNING


def check(contract: ContractIR, usage: frozenset[str] | None = None) -> list[Violation]:
    if usage is None:
        # No impl block was paired with this struct
        return []

    violations: list[Violation] = []
    for field in contract.all_fields():
        if is_field_used(field.name, usage):
            continue
        violations.append(
            Violation(
                rule_id=RULE_ID,
                description=(
                    f"State variable '{field.name}' is declared but never used in contract "
                    f"'{contract.name}'. This wastes storage space and increases ledger "
                    f"rent costs."
                ),
                severity=SEVERITY,
                line_number=field.line_number,
                column_number=field.column_number,
                subject_name=field.name,
                suggestion=(
                    f"Consider removing the unused state variable '{field.name}' or implement "
                    f"functionality that uses it. If it's reserved for future use, add a "
                    f"comment explaining its purpose."
                ),
            )
        )
    return violations
