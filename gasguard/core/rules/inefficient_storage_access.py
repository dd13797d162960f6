"""
Inefficient Storage Access Rule — functions that hit ledger storage repeatedly.

Every storage read or write is a metered ledger interaction. More than
STORAGE_OPS_THRESHOLD accesses in one function usually means a value should
be cached in a local.
"""

from __future__ import annotations

from gasguard.models.contract_models import ContractIR
from gasguard.models.rule_models import Severity, Violation


RULE_ID = "inefficient-storage-access"
DISPLAY_NAME = "Inefficient Storage Access"
DESCRIPTION = "Detects multiple reads/writes to the same storage key without caching"
SEVERITY = Severity.MEDIUM

STORAGE_CALLS = (".get(", ".set(", ".load(", ".store(")
STORAGE_OPS_THRESHOLD = 3


def count_storage_operations(body: str) -> int:
    return sum(body.count(call) for call in STORAGE_CALLS)


def check(contract: ContractIR, usage: frozenset[str] | None = None) -> list[Violation]:
    violations: list[Violation] = []

    for func in contract.all_functions():
        total_ops = count_storage_operations(func.raw_body)
        if total_ops <= STORAGE_OPS_THRESHOLD:
            continue
        violations.append(
            Violation(
                rule_id=RULE_ID,
                description=(
                    f"Function '{func.name}' performs {total_ops} storage operations "
                    f"- consider caching"
                ),
                severity=SEVERITY,
                line_number=func.line_number,
                column_number=func.column_number,
                subject_name=func.name,
                suggestion=(
                    "Cache frequently accessed storage values in local variables "
                    "to reduce ledger interactions"
                ),
            )
        )

    return violations
