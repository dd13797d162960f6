"""
Vyper Rule Engine — rules for `.vy` contracts over the line-recovered ContractIR.
"""

from __future__ import annotations

import logging

from gasguard.core.rule_engine import CheckRule, Rule, RuleEngine
from gasguard.core.rules import redundant_external_decorator
from gasguard.core.vyper_builder import VyperIRBuilder
from gasguard.models.rule_models import Violation

logger = logging.getLogger("gasguard.vyper")

VYPER_RULE_MODULES = (redundant_external_decorator,)


class VyperRuleEngine(RuleEngine):
    name = "vyper"

    def __init__(self, *args, **kwargs) -> None:
        self.builder = VyperIRBuilder()
        super().__init__(*args, **kwargs)

    def default_rules(self) -> list[Rule]:
        return [CheckRule.from_module(module) for module in VYPER_RULE_MODULES]

    def analyze_source(self, source: str, source_path: str = "<unknown>") -> list[Violation]:
        contract = self.builder.build(source, source_path)
        violations = self.analyze(contract)
        logger.debug(f"{source_path}: vyper engine found {len(violations)} violations")
        return violations
