"""
Expensive String Operation Rule — string construction inside contract functions.

Heap-allocated strings cost both CPU instructions and, when persisted, ledger
bytes. Symbol or Bytes are the usual cheaper choice for fixed data.
"""

from __future__ import annotations

from gasguard.models.contract_models import ContractIR
from gasguard.models.rule_models import Severity, Violation


RULE_ID = "expensive-string-operation"
DISPLAY_NAME = "Expensive String Operations"
DESCRIPTION = "Detects expensive string operations that increase gas/storage costs"
SEVERITY = Severity.MEDIUM

STRING_OPERATIONS = (".to_string()", "String::from(", "format!(")


def check(contract: ContractIR, usage: frozenset[str] | None = None) -> list[Violation]:
    violations: list[Violation] = []

    for func in contract.all_functions():
        if not any(op in func.raw_body for op in STRING_OPERATIONS):
            continue
        violations.append(
            Violation(
                rule_id=RULE_ID,
                description=f"Function '{func.name}' uses expensive string operations",
                severity=SEVERITY,
                line_number=func.line_number,
                column_number=func.column_number,
                subject_name=func.name,
                suggestion=(
                    "Consider using Symbol or Bytes for fixed data, or minimize string "
                    "operations to reduce gas costs"
                ),
            )
        )

    return violations
