"""
Soroban Rule Engine — text-recovered heuristic catalogue for `.rs` contracts.

Builds a ContractIR with SorobanIRBuilder and runs the catalogue below in
registration order.
"""

from __future__ import annotations

import logging
import time

from gasguard.core.rule_engine import CheckRule, Rule, RuleEngine
from gasguard.core.soroban_builder import SorobanIRBuilder
from gasguard.models.rule_models import Violation

# Import all rule modules
from gasguard.core.rules import (
    expensive_string_operation,
    inefficient_integer_type,
    inefficient_storage_access,
    missing_address_validation,
    missing_admin_pattern,
    missing_constructor,
    missing_error_handling,
    private_contract_field,
    string_instead_of_symbol,
    unbounded_loop,
    unnecessary_clone,
    unused_state_variable,
    vec_without_capacity,
)

logger = logging.getLogger("gasguard.soroban")

# Registration order is the order violations are reported in
SOROBAN_RULE_MODULES = (
    unused_state_variable,
    inefficient_integer_type,
    string_instead_of_symbol,
    private_contract_field,
    expensive_string_operation,
    vec_without_capacity,
    unnecessary_clone,
    missing_address_validation,
    missing_error_handling,
    unbounded_loop,
    inefficient_storage_access,
    missing_constructor,
    missing_admin_pattern,
)


class SorobanRuleEngine(RuleEngine):
    """Heuristic engine over the structurally recovered ContractIR."""

    name = "heuristic"

    def __init__(self, *args, **kwargs) -> None:
        self.builder = SorobanIRBuilder()
        super().__init__(*args, **kwargs)

    def default_rules(self) -> list[Rule]:
        return [CheckRule.from_module(module) for module in SOROBAN_RULE_MODULES]

    def analyze_source(self, source: str, source_path: str = "<unknown>") -> list[Violation]:
        """Recover the contract from source text and apply the enabled rules.

        Raises StructuralParseError if no contract name can be recovered.
        """
        start = time.monotonic()
        contract = self.builder.build(source, source_path)
        violations = self.analyze(contract)
        elapsed_ms = (time.monotonic() - start) * 1000
        logger.debug(
            f"{source_path}: heuristic engine found {len(violations)} violations "
            f"in {elapsed_ms:.1f}ms"
        )
        return violations
