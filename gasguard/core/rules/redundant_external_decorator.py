"""
Redundant External Decorator Rule — Vyper functions exposed with @external that look internal.

Two signals, checked in order:
  1. naming: the name starts with a single underscore (`_helper`);
  2. internal usage: the function is called as `self.name(...)` somewhere,
     is not an entry point, and its name reads like a helper.

External functions get an ABI entry and dispatcher code; marking helpers
@internal saves gas and keeps internal logic off the public surface.
"""

from __future__ import annotations

from gasguard.models.contract_models import ContractIR, Function
from gasguard.models.rule_models import Severity, Violation


RULE_ID = "redundant-external-decorator"
DISPLAY_NAME = "Redundant External Decorator"
DESCRIPTION = (
    "Detects internal functions that are accidentally marked as @external, "
    "which leads to higher gas consumption and potential security gaps."
)
SEVERITY = Severity.WARNING

ENTRY_POINT_NAMES = {"__init__", "__default__", "initialize", "setup"}

HELPER_NAME_PATTERNS = (
    "helper",
    "util",
    "compute",
    "calculate",
    "validate",
    "check",
    "get_",
    "set_",
    "update_",
    "process_",
    "handle_",
)


def check(contract: ContractIR, usage: frozenset[str] | None = None) -> list[Violation]:
    violations: list[Violation] = []
    self_called = contract.self_called_names()

    for func in contract.all_functions():
        if not func.has_decorator("external"):
            continue

        if func.name.startswith("_") and not func.name.startswith("__"):
            violations.append(_naming_violation(func))
        elif _is_only_called_internally(func.name, self_called):
            violations.append(_internal_usage_violation(func))

    return violations


def _is_only_called_internally(name: str, self_called: set[str]) -> bool:
    if name not in self_called or name in ENTRY_POINT_NAMES:
        return False
    lowered = name.lower()
    return any(pattern in lowered for pattern in HELPER_NAME_PATTERNS)


def _naming_violation(func: Function) -> Violation:
    return Violation(
        rule_id=RULE_ID,
        description=(
            f"Function '{func.name}' is marked @external but uses internal naming "
            f"convention (_prefix). This may expose internal logic unnecessarily and "
            f"increase gas costs."
        ),
        severity=SEVERITY,
        line_number=func.line_number,
        column_number=func.column_number,
        subject_name=func.name,
        suggestion=(
            f"Consider changing @external to @internal for function '{func.name}'. "
            f"Internal functions save gas by not generating external interface code "
            f"and improve security by not exposing internal logic."
        ),
    )


def _internal_usage_violation(func: Function) -> Violation:
    return Violation(
        rule_id=RULE_ID,
        description=(
            f"Function '{func.name}' is marked @external but appears to only be called "
            f"internally (via self.{func.name}()). This wastes gas and may expose "
            f"internal logic unnecessarily."
        ),
        severity=SEVERITY,
        line_number=func.line_number,
        column_number=func.column_number,
        subject_name=func.name,
        suggestion=(
            f"Consider changing @external to @internal for function '{func.name}' if it's "
            f"not meant to be called externally. Internal functions are more gas-efficient "
            f"and don't expose the function in the contract's ABI."
        ),
    )
