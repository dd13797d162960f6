"""
Tests for the Vyper engine — redundant @external decorator detection.
"""

from gasguard.core.vyper_engine import VyperRuleEngine
from gasguard.models.rule_models import Severity


def _analyze(source):
    return VyperRuleEngine().analyze_source(source, "contract.vy")


def test_detect_external_on_internal_naming():
    violations = _analyze('''
# @version ^0.3.0

@external
def _internal_helper() -> uint256:
    return 42

@external
def public_function() -> uint256:
    return self._internal_helper()
''')
    assert len(violations) == 1
    assert violations[0].subject_name == "_internal_helper"
    assert "internal naming convention" in violations[0].description
    assert violations[0].severity == Severity.WARNING


def test_no_violation_on_proper_internal():
    violations = _analyze('''
# @version ^0.3.0

@internal
def _helper() -> uint256:
    return 42

@external
def public_function() -> uint256:
    return self._helper()
''')
    assert violations == []


def test_no_violation_on_legitimate_external():
    violations = _analyze('''
# @version ^0.3.0

@external
def deposit(amount: uint256):
    pass

@external
def withdraw(amount: uint256):
    pass

@external
@view
def balance() -> uint256:
    return 0
''')
    assert violations == []


def test_detect_helper_function_called_internally():
    violations = _analyze('''
# @version ^0.3.0

@external
def calculate_fee(amount: uint256) -> uint256:
    return amount * 3 / 1000

@external
def process_payment(amount: uint256):
    fee: uint256 = self.calculate_fee(amount)
''')
    assert len(violations) == 1
    assert violations[0].subject_name == "calculate_fee"
    assert "via self.calculate_fee()" in violations[0].description


def test_multiple_violations():
    violations = _analyze('''
# @version ^0.3.0

@external
def _private_logic():
    pass

@external
def _another_internal():
    pass

@external
def public_api():
    self._private_logic()
    self._another_internal()
''')
    assert [v.subject_name for v in violations] == ["_private_logic", "_another_internal"]


def test_dunder_methods_not_flagged():
    violations = _analyze('''
# @version ^0.3.0

@external
def __init__():
    pass

@external
def __default__():
    pass
''')
    assert violations == []


def test_entry_points_called_internally_not_flagged():
    violations = _analyze('''
@external
def setup():
    pass

@external
def run():
    self.setup()
''')
    assert violations == []


def test_violation_position_is_first_decorator(vyper_contract):
    violations = VyperRuleEngine().analyze_source(vyper_contract, "vault.vy")
    assert [(v.subject_name, v.line_number, v.column_number) for v in violations] == [
        ("_internal_helper", 19, 1),
        ("calculate_fee", 23, 1),
    ]
