"""
Missing Error Handling Rule — state-changing functions that do not return Result.
"""

from __future__ import annotations

from gasguard.models.contract_models import ContractIR
from gasguard.models.rule_models import Severity, Violation


RULE_ID = "missing-error-handling"
DISPLAY_NAME = "Missing Error Handling"
DESCRIPTION = "Detects functions that should return Result but don't"
SEVERITY = Severity.MEDIUM

NAME_MARKERS = ("transfer", "mint", "burn", "set")


def check(contract: ContractIR, usage: frozenset[str] | None = None) -> list[Violation]:
    violations: list[Violation] = []

    for func in contract.all_functions():
        if not any(marker in func.name for marker in NAME_MARKERS):
            continue
        if func.return_type is not None and "Result" in func.return_type:
            continue
        violations.append(
            Violation(
                rule_id=RULE_ID,
                description=f"Function '{func.name}' should return Result for proper error handling",
                severity=SEVERITY,
                line_number=func.line_number,
                column_number=func.column_number,
                subject_name=func.name,
                suggestion=(
                    "Return Result<(), Error> to properly handle operation failures "
                    "and provide better error reporting"
                ),
            )
        )

    return violations
