"""
Tests for ContractScanner — format dispatch, file and directory scans.
"""

import pytest

from gasguard.core.scanner import ContractScanner, Language, walk_contracts
from gasguard.exceptions import GrammarParseError, ScanIOError


def test_language_from_extension():
    assert Language.from_path("a/b/token.rs") is Language.RUST
    assert Language.from_path("VAULT.VY") is Language.VYPER
    assert Language.from_path("notes.md") is None


def test_rust_defaults_to_grammar_engine(unused_var_contract):
    result = ContractScanner(rust_engine="grammar").scan_content(unused_var_contract, "token.rs")
    assert [v.subject_name for v in result.violations] == ["unusedVar"]


def test_heuristic_engine_selection(catalogue_contract):
    scanner = ContractScanner(rust_engine="grammar")
    grammar = scanner.scan_content(catalogue_contract, "vault.rs")
    heuristic = scanner.scan_content(catalogue_contract, "vault.rs", rust_engine="heuristic")
    assert grammar.violations == []
    assert len(heuristic.violations) == 15


def test_all_engines_run_grammar_first(unused_var_contract):
    result = ContractScanner(rust_engine="all").scan_content(unused_var_contract, "token.rs")
    assert result.violations[0].description.startswith("State variable 'unusedVar' is declared")
    assert len(result.violations) > 1


def test_vyper_dispatch(vyper_contract):
    result = ContractScanner().scan_content(vyper_contract, "vault.vy", Language.VYPER)
    assert [v.rule_id for v in result.violations] == ["redundant-external-decorator"] * 2


def test_unknown_format_is_empty():
    result = ContractScanner().scan_content("whatever", "notes.txt", language=None)
    assert result.violations == []
    assert result.error is None


def test_scan_file_reads_and_dispatches(tmp_path, unused_var_contract):
    path = tmp_path / "token.rs"
    path.write_text(unused_var_contract)
    result = ContractScanner(rust_engine="grammar").scan_file(path)
    assert result.source == str(path)
    assert len(result.violations) == 1


def test_scan_file_unknown_extension(tmp_path):
    path = tmp_path / "README.md"
    path.write_text("# nothing")
    assert ContractScanner().scan_file(path).violations == []


def test_scan_file_missing_raises():
    with pytest.raises(ScanIOError):
        ContractScanner().scan_file("/nonexistent/contract.rs")


def test_scan_file_size_limit(tmp_path):
    path = tmp_path / "big.rs"
    path.write_text("// padding\n" * 20)
    with pytest.raises(ScanIOError, match="exceeds limit"):
        ContractScanner(max_file_size_bytes=16).scan_file(path)


def test_single_file_parse_error_propagates(tmp_path):
    path = tmp_path / "broken.rs"
    path.write_text("#[contracttype] pub struct {")
    with pytest.raises(GrammarParseError):
        ContractScanner(rust_engine="grammar").scan_file(path)


def test_scan_is_idempotent(catalogue_contract):
    scanner = ContractScanner(rust_engine="all")
    first = scanner.scan_content(catalogue_contract, "vault.rs")
    second = scanner.scan_content(catalogue_contract, "vault.rs")
    assert first.violations == second.violations


# ── Directories ──


@pytest.fixture
def contract_tree(tmp_path, unused_var_contract, five_field_contract, all_used_contract, vyper_contract):
    (tmp_path / "b").mkdir()
    (tmp_path / "a").mkdir()
    (tmp_path / "b" / "ledger.rs").write_text(five_field_contract)
    (tmp_path / "a" / "token.rs").write_text(unused_var_contract)
    (tmp_path / "a" / "counter.rs").write_text(all_used_contract)
    (tmp_path / "vault.vy").write_text(vyper_contract)
    (tmp_path / "notes.txt").write_text("not a contract")
    return tmp_path


def test_walk_contracts_sorted_and_filtered(contract_tree):
    paths = walk_contracts(contract_tree)
    assert [p.relative_to(contract_tree).as_posix() for p in paths] == [
        "a/counter.rs",
        "a/token.rs",
        "b/ledger.rs",
        "vault.vy",
    ]


@pytest.mark.parametrize("workers", [1, 4])
def test_directory_report_aggregates_in_order(contract_tree, workers):
    scanner = ContractScanner(rust_engine="grammar")
    report = scanner.scan_directory(contract_tree, workers=workers)

    sources = [r.source for r in report.results]
    assert sources == [str(p) for p in walk_contracts(contract_tree)]
    per_file = [len(scanner.scan_file(p).violations) for p in walk_contracts(contract_tree)]
    assert per_file == [0, 1, 3, 2]
    assert report.total_violations == sum(per_file)
    assert report.storage_savings.unused_field_count == 4


def test_directory_isolates_failing_files(contract_tree, caplog):
    (contract_tree / "a" / "broken.rs").write_text("#[contracttype] pub struct {")
    report = ContractScanner(rust_engine="grammar").scan_directory(contract_tree)

    assert report.failed_files == [str(contract_tree / "a" / "broken.rs")]
    broken = report.results[0]
    assert broken.violations == []
    assert "parse" in broken.error
    assert report.total_violations == 6
    assert "Scan failed" in caplog.text


def test_directory_must_exist(tmp_path):
    with pytest.raises(ScanIOError):
        ContractScanner().scan_directory(tmp_path / "missing")
