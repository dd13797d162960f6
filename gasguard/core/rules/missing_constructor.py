"""
Missing Constructor Rule — contracts with no initialization function.
"""

from __future__ import annotations

from gasguard.models.contract_models import ContractIR
from gasguard.models.rule_models import Severity, Violation


RULE_ID = "missing-constructor"
DISPLAY_NAME = "Missing Constructor"
DESCRIPTION = "Detects contracts without constructor functions for initialization"
SEVERITY = Severity.WARNING


def check(contract: ContractIR, usage: frozenset[str] | None = None) -> list[Violation]:
    if any(func.is_constructor for func in contract.all_functions()):
        return []
    return [
        Violation(
            rule_id=RULE_ID,
            description="Contract lacks a constructor function for initialization",
            severity=SEVERITY,
            line_number=1,
            subject_name=contract.name,
            suggestion="Add a 'new' function that initializes the contract state properly",
        )
    ]
