"""
Missing Admin Pattern Rule — no admin/owner field for access control.
"""

from __future__ import annotations

from gasguard.models.contract_models import ContractIR
from gasguard.models.rule_models import Severity, Violation


RULE_ID = "missing-admin-pattern"
DISPLAY_NAME = "Admin Pattern Suggestion"
DESCRIPTION = "Suggests adding admin/owner pattern for access control"
SEVERITY = Severity.INFO


def check(contract: ContractIR, usage: frozenset[str] | None = None) -> list[Violation]:
    fields = contract.all_fields()
    has_admin = any(
        "admin" in f.name or "owner" in f.name or "Address" in f.type_name for f in fields
    )
    if has_admin:
        return []
    return [
        Violation(
            rule_id=RULE_ID,
            description="Consider adding an admin/owner field for access control",
            severity=SEVERITY,
            line_number=1,
            subject_name=contract.name,
            suggestion=(
                "Add an 'admin: Address' field to your contract state for administrative functions"
            ),
        )
    ]
