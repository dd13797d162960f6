"""
Inefficient Integer Type Rule — 128-bit integer fields that could likely be narrower.
"""

from __future__ import annotations

from gasguard.models.contract_models import ContractIR
from gasguard.models.rule_models import Severity, Violation


RULE_ID = "inefficient-integer-type"
DISPLAY_NAME = "Inefficient Integer Types"
DESCRIPTION = "Detects use of unnecessarily large integer types"
SEVERITY = Severity.INFO

WIDE_INTEGER_TYPES = {"u128", "i128"}


def check(contract: ContractIR, usage: frozenset[str] | None = None) -> list[Violation]:
    return [
        Violation(
            rule_id=RULE_ID,
            description=(
                f"Field '{field.name}' uses {field.type_name} which may be unnecessarily large"
            ),
            severity=SEVERITY,
            line_number=field.line_number,
            column_number=field.column_number,
            subject_name=field.name,
            suggestion="Consider using a smaller integer type like u64 or u32 if the range permits",
        )
        for field in contract.all_fields()
        if field.type_name in WIDE_INTEGER_TYPES
    ]
