"""
Vec Without Capacity Rule — `Vec::new()` in a function that never pre-allocates.
"""

from __future__ import annotations

from gasguard.models.contract_models import ContractIR
from gasguard.models.rule_models import Severity, Violation


RULE_ID = "vec-without-capacity"
DISPLAY_NAME = "Vec Without Capacity"
DESCRIPTION = "Detects vectors created without a pre-allocated capacity"
SEVERITY = Severity.MEDIUM


def check(contract: ContractIR, usage: frozenset[str] | None = None) -> list[Violation]:
    violations: list[Violation] = []
    for func in contract.all_functions():
        body = func.raw_body
        if "Vec::new()" not in body or "with_capacity" in body:
            continue
        violations.append(
            Violation(
                rule_id=RULE_ID,
                description="Vec::new() without capacity can cause multiple reallocations",
                severity=SEVERITY,
                line_number=func.line_number,
                column_number=func.column_number,
                subject_name=func.name,
                suggestion="Use Vec::with_capacity() to pre-allocate memory when size is known",
            )
        )
    return violations
