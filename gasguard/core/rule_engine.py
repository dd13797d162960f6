"""
Rule Engine — Ordered, pluggable collection of heuristic rules.

A rule is anything satisfying the `Rule` protocol. Rule modules under
`gasguard.core.rules` expose RULE_ID / DISPLAY_NAME / DESCRIPTION /
SEVERITY and a pure `check()` function; `CheckRule.from_module` adapts
them to the protocol. Engines run enabled rules in registration order and
concatenate their violations without reordering.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import ModuleType
from typing import Callable, Iterable, Protocol, runtime_checkable

from gasguard.config import settings
from gasguard.exceptions import UnknownRuleError
from gasguard.models.contract_models import ContractIR
from gasguard.models.rule_models import RuleInfo, Severity, Violation

UsageSet = frozenset[str]

# Type for a rule check function
RuleCheckFn = Callable[[ContractIR, "UsageSet | None"], list[Violation]]


@runtime_checkable
class Rule(Protocol):
    """Capability set every rule provides."""

    id: str
    display_name: str
    description: str
    severity: Severity

    def is_enabled(self) -> bool: ...

    def set_enabled(self, enabled: bool) -> None: ...

    def apply(self, contract: ContractIR, usage: UsageSet | None = None) -> list[Violation]: ...


@dataclass
class CheckRule:
    """A rule backed by a plain check function."""

    id: str
    display_name: str
    description: str
    severity: Severity
    check: RuleCheckFn
    enabled: bool = True

    @classmethod
    def from_module(cls, module: ModuleType) -> CheckRule:
        return cls(
            id=module.RULE_ID,
            display_name=module.DISPLAY_NAME,
            description=module.DESCRIPTION,
            severity=module.SEVERITY,
            check=module.check,
        )

    def is_enabled(self) -> bool:
        return self.enabled

    def set_enabled(self, enabled: bool) -> None:
        self.enabled = enabled

    def apply(self, contract: ContractIR, usage: UsageSet | None = None) -> list[Violation]:
        return self.check(contract, usage)


class RuleEngine:
    """
    Deterministic rule engine.

    Holds rules in registration order. Carries no per-scan state besides
    each rule's enabled flag, so one instance can be reused across scans.
    """

    name = "base"

    def __init__(
        self,
        rules: Iterable[Rule] | None = None,
        disabled_rules: Iterable[str] | None = None,
    ) -> None:
        self._rules: list[Rule] = []
        if disabled_rules is None:
            disabled_rules = settings.disabled_rules
        for rule in (rules if rules is not None else self.default_rules()):
            self.add_rule(rule)
        for rule_id in disabled_rules:
            # Settings list ids across all engines; ignore the ones not registered here
            if self.has_rule(rule_id):
                self.disable(rule_id)

    def default_rules(self) -> list[Rule]:
        return []

    @property
    def rules(self) -> list[Rule]:
        return list(self._rules)

    def add_rule(self, rule: Rule) -> RuleEngine:
        if self.has_rule(rule.id):
            raise ValueError(f"Rule '{rule.id}' is already registered with {self.name}")
        self._rules.append(rule)
        return self

    def has_rule(self, rule_id: str) -> bool:
        return any(rule.id == rule_id for rule in self._rules)

    def get_rule(self, rule_id: str) -> Rule:
        for rule in self._rules:
            if rule.id == rule_id:
                return rule
        raise UnknownRuleError(f"Unknown rule: {rule_id}")

    def set_rule_enabled(self, rule_id: str, enabled: bool) -> None:
        self.get_rule(rule_id).set_enabled(enabled)

    def enable(self, rule_id: str) -> None:
        self.set_rule_enabled(rule_id, True)

    def disable(self, rule_id: str) -> None:
        self.set_rule_enabled(rule_id, False)

    def analyze(self, contract: ContractIR, usage: UsageSet | None = None) -> list[Violation]:
        """Apply every enabled rule in registration order and concatenate the results."""
        violations: list[Violation] = []
        for rule in self._rules:
            if rule.is_enabled():
                violations.extend(rule.apply(contract, usage))
        return violations

    def rule_info(self) -> list[RuleInfo]:
        return [
            RuleInfo(
                id=rule.id,
                display_name=rule.display_name,
                description=rule.description,
                severity=rule.severity,
                enabled=rule.is_enabled(),
                engine=self.name,
            )
            for rule in self._rules
        ]
