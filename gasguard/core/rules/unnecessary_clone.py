"""
Unnecessary Clone Rule — `.clone()` calls inside contract functions.
"""

from __future__ import annotations

from gasguard.models.contract_models import ContractIR
from gasguard.models.rule_models import Severity, Violation


RULE_ID = "unnecessary-clone"
DISPLAY_NAME = "Unnecessary Clone"
DESCRIPTION = "Detects clone operations that add resource usage"
SEVERITY = Severity.MEDIUM


def check(contract: ContractIR, usage: frozenset[str] | None = None) -> list[Violation]:
    return [
        Violation(
            rule_id=RULE_ID,
            description="Clone operations increase resource usage and gas costs",
            severity=SEVERITY,
            line_number=func.line_number,
            column_number=func.column_number,
            subject_name=func.name,
            suggestion="Avoid unnecessary cloning, use references where possible",
        )
        for func in contract.all_functions()
        if ".clone()" in func.raw_body
    ]
