"""
Tests for the heuristic Soroban engine — verify each catalogue rule fires correctly.
"""

import pytest

from gasguard.core.rule_engine import CheckRule, Rule, RuleEngine
from gasguard.core.soroban_engine import SorobanRuleEngine
from gasguard.exceptions import StructuralParseError, UnknownRuleError
from gasguard.models.contract_models import (
    ContractField,
    ContractIR,
    DeclaredType,
    Function,
    ImplementationBlock,
    Parameter,
)
from gasguard.models.rule_models import Severity, Violation


def _contract(functions=(), fields=(), source_text=""):
    return ContractIR(
        name="Probe",
        declared_types=(DeclaredType(name="ProbeState", fields=tuple(fields)),),
        implementations=(
            ImplementationBlock(target_type_name="Probe", functions=tuple(functions)),
        ),
        source_text=source_text,
    )


def _ids(violations):
    return [v.rule_id for v in violations]


def _only(engine, *rule_ids):
    for rule in engine.rules:
        rule.set_enabled(rule.id in rule_ids)
    return engine


def test_catalogue_on_sample_contract(catalogue_contract):
    violations = SorobanRuleEngine(disabled_rules=[]).analyze_source(catalogue_contract, "vault.rs")
    assert [(v.rule_id, v.subject_name) for v in violations] == [
        ("unused-state-variable", "total_supply"),
        ("unused-state-variable", "label"),
        ("unused-state-variable", "reserve"),
        ("inefficient-integer-type", "total_supply"),
        ("string-instead-of-symbol", "label"),
        ("private-contract-field", "reserve"),
        ("expensive-string-operation", "set_admin"),
        ("unnecessary-clone", "set_admin"),
        ("missing-address-validation", "set_admin"),
        ("missing-error-handling", "set_admin"),
        ("missing-error-handling", "mint"),
        ("unbounded-loop", "mint"),
        ("inefficient-storage-access", "stats"),
        ("missing-constructor", "Vault"),
        ("missing-admin-pattern", "Vault"),
    ]


def test_severities_follow_catalogue(catalogue_contract):
    violations = SorobanRuleEngine(disabled_rules=[]).analyze_source(catalogue_contract, "vault.rs")
    severities = {v.rule_id: v.severity for v in violations}
    assert severities["unused-state-variable"] == Severity.WARNING
    assert severities["inefficient-integer-type"] == Severity.INFO
    assert severities["unbounded-loop"] == Severity.HIGH
    assert severities["inefficient-storage-access"] == Severity.MEDIUM
    assert severities["missing-admin-pattern"] == Severity.INFO


def test_clean_contract_has_no_findings(clean_soroban_contract):
    assert SorobanRuleEngine(disabled_rules=[]).analyze_source(clean_soroban_contract, "r.rs") == []


def test_unused_field_heuristic_counts_occurrences():
    fields = [ContractField(name="alpha", type_name="u32"), ContractField(name="beta", type_name="u32")]
    source = "alpha beta beta"
    engine = _only(SorobanRuleEngine(), "unused-state-variable")
    violations = engine.analyze(_contract(fields=fields, source_text=source))
    assert [v.subject_name for v in violations] == ["alpha"]


def test_vec_with_capacity_is_not_flagged():
    funcs = [
        Function(name="grow", raw_body="let v = Vec::new(); v.push(1);"),
        Function(name="sized", raw_body="let v = Vec::new(); let w = Vec::with_capacity(4);"),
    ]
    engine = _only(SorobanRuleEngine(), "vec-without-capacity")
    assert [v.subject_name for v in engine.analyze(_contract(funcs))] == ["grow"]


def test_bounded_loops_are_not_flagged():
    funcs = [
        Function(name="a", raw_body="for i in 0..10 { }"),
        Function(name="b", raw_body="for x in items { if i < items.len() {} }"),
        Function(name="c", raw_body="loop { break; }"),
    ]
    engine = _only(SorobanRuleEngine(), "unbounded-loop")
    assert [v.subject_name for v in engine.analyze(_contract(funcs))] == ["c"]


def test_storage_access_threshold():
    funcs = [
        Function(name="three", raw_body="s.get(1); s.set(2); s.load(3);"),
        Function(name="four", raw_body="s.get(1); s.set(2); s.load(3); s.store(4);"),
    ]
    engine = _only(SorobanRuleEngine(), "inefficient-storage-access")
    violations = engine.analyze(_contract(funcs))
    assert [v.subject_name for v in violations] == ["four"]
    assert "performs 4 storage operations" in violations[0].description


def test_address_validation_reported_once_per_function():
    func = Function(
        name="transfer",
        parameters=(Parameter(name="from", type_name="Address"), Parameter(name="to", type_name="Address")),
        return_type="Result<(), Error>",
    )
    engine = _only(SorobanRuleEngine(), "missing-address-validation", "missing-error-handling")
    assert _ids(engine.analyze(_contract([func]))) == ["missing-address-validation"]


def test_constructor_suppresses_missing_constructor():
    engine = _only(SorobanRuleEngine(), "missing-constructor")
    assert engine.analyze(_contract([Function(name="vault_init", is_constructor=True)])) == []
    violations = engine.analyze(_contract([Function(name="deposit")]))
    assert violations[0].subject_name == "Probe"
    assert violations[0].line_number == 1


def test_missing_contract_name_propagates():
    with pytest.raises(StructuralParseError):
        SorobanRuleEngine().analyze_source("pub fn loose() {}", "loose.rs")


# ── Engine management ──


def test_rules_keep_registration_order():
    engine = SorobanRuleEngine(disabled_rules=[])
    assert [r.id for r in engine.rules][:3] == [
        "unused-state-variable",
        "inefficient-integer-type",
        "string-instead-of-symbol",
    ]
    assert len(engine.rules) == 13
    assert all(isinstance(r, Rule) for r in engine.rules)


def test_enable_disable_round_trip(catalogue_contract):
    engine = SorobanRuleEngine(disabled_rules=[])
    engine.disable("unused-state-variable")
    assert not engine.get_rule("unused-state-variable").is_enabled()
    assert "unused-state-variable" not in _ids(engine.analyze_source(catalogue_contract, "v.rs"))

    engine.enable("unused-state-variable")
    assert "unused-state-variable" in _ids(engine.analyze_source(catalogue_contract, "v.rs"))


def test_unknown_rule_id_raises():
    engine = SorobanRuleEngine()
    with pytest.raises(UnknownRuleError, match="no-such-rule"):
        engine.disable("no-such-rule")
    with pytest.raises(KeyError):
        engine.get_rule("no-such-rule")


def test_disabled_rules_from_constructor():
    engine = SorobanRuleEngine(disabled_rules=["unnecessary-clone", "not-registered-here"])
    assert not engine.get_rule("unnecessary-clone").is_enabled()
    assert engine.get_rule("unbounded-loop").is_enabled()


def test_custom_rule_can_be_registered():
    def flag_everything(contract, usage=None):
        return [Violation(rule_id="custom", description="hit", severity=Severity.ERROR)]

    rule = CheckRule(
        id="custom",
        display_name="Custom",
        description="Always fires",
        severity=Severity.ERROR,
        check=flag_everything,
    )
    engine = RuleEngine(rules=[rule])
    assert _ids(engine.analyze(_contract())) == ["custom"]
    with pytest.raises(ValueError):
        engine.add_rule(rule)


def test_rule_info_reports_engine_and_state():
    engine = SorobanRuleEngine(disabled_rules=["unbounded-loop"])
    info = {i.id: i for i in engine.rule_info()}
    assert info["unbounded-loop"].enabled is False
    assert info["unbounded-loop"].engine == "heuristic"
    assert info["unbounded-loop"].display_name == "Unbounded Loop Detection"


def test_analysis_is_idempotent(catalogue_contract):
    engine = SorobanRuleEngine()
    assert engine.analyze_source(catalogue_contract, "v.rs") == engine.analyze_source(
        catalogue_contract, "v.rs"
    )
