"""
Unbounded Loop Rule — Detects loops without a visible bound.

Soroban meters CPU instructions per invocation; a loop whose trip count
depends on unbounded state can exhaust the budget and make the function
uncallable. A body mentioning `.len()`, `range(` or a `..` range is treated
as bounded.
"""

from __future__ import annotations

from gasguard.models.contract_models import ContractIR
from gasguard.models.rule_models import Severity, Violation


RULE_ID = "unbounded-loop"
DISPLAY_NAME = "Unbounded Loop Detection"
DESCRIPTION = "Detects loops without clear termination conditions that could exhaust CPU limits"
SEVERITY = Severity.HIGH

LOOP_MARKERS = ("loop {", "while ", "for ")
BOUND_MARKERS = (".len()", "range(", "..")


def check(contract: ContractIR, usage: frozenset[str] | None = None) -> list[Violation]:
    """Flag functions with a loop keyword and no bound marker."""
    violations: list[Violation] = []

    for func in contract.all_functions():
        body = func.raw_body
        if not any(marker in body for marker in LOOP_MARKERS):
            continue
        if any(marker in body for marker in BOUND_MARKERS):
            continue
        violations.append(
            Violation(
                rule_id=RULE_ID,
                description=f"Function '{func.name}' contains potentially unbounded loop",
                severity=SEVERITY,
                line_number=func.line_number,
                column_number=func.column_number,
                subject_name=func.name,
                suggestion=(
                    "Ensure loops have clear termination conditions to prevent CPU limit exhaustion"
                ),
            )
        )

    return violations
