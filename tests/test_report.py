"""
Tests for report aggregation — categorization, storage estimate, merging, JSON shape.
"""

import json

import pytest

from gasguard.core.report import categorize, merge, storage_savings, summarize
from gasguard.models.rule_models import Severity, Violation
from gasguard.models.scan_models import Report, ScanResult


def _violation(rule_id="unused-state-variable", severity=Severity.WARNING, subject="x"):
    return Violation(
        rule_id=rule_id,
        description=f"{rule_id} on {subject}",
        severity=severity,
        subject_name=subject,
    )


def test_severity_is_totally_ordered():
    assert Severity.INFO < Severity.WARNING < Severity.MEDIUM < Severity.HIGH < Severity.ERROR
    assert max(Severity) == Severity.ERROR
    assert sorted([Severity.HIGH, Severity.INFO, Severity.MEDIUM]) == [
        Severity.INFO,
        Severity.MEDIUM,
        Severity.HIGH,
    ]


def test_categorize_partitions_every_violation():
    violations = [_violation(severity=s, subject=s.value) for s in Severity]
    tiers = categorize(violations)
    assert [v.severity for v in tiers.errors] == [Severity.HIGH, Severity.ERROR]
    assert [v.severity for v in tiers.warnings] == [Severity.WARNING, Severity.MEDIUM]
    assert [v.severity for v in tiers.info] == [Severity.INFO]
    assert len(tiers.errors) + len(tiers.warnings) + len(tiers.info) == len(violations)


@pytest.mark.parametrize("count", [0, 1, 3, 10])
def test_storage_savings_is_linear(count):
    violations = [_violation(subject=f"f{i}") for i in range(count)]
    violations.append(_violation(rule_id="unbounded-loop", severity=Severity.HIGH))
    savings = storage_savings(violations)
    assert savings.unused_field_count == count
    assert savings.estimated_kb == pytest.approx(2.5 * count)
    assert savings.estimated_monthly_rent == pytest.approx(0.0025 * count)


def test_merge_returns_new_report_in_order():
    first = ScanResult(source="a.rs", violations=[_violation(subject="a")])
    second = ScanResult(source="b.vy", violations=[_violation(subject="b1"), _violation(subject="b2")])
    empty = Report()

    report = merge(merge(empty, first), second)
    assert empty.results == []
    assert [r.source for r in report.results] == ["a.rs", "b.vy"]
    assert [v.subject_name for v in report.violations] == ["a", "b1", "b2"]
    assert report.total_violations == 3


def test_report_derived_metrics():
    report = Report(
        results=[
            ScanResult(source="ok.rs", violations=[_violation(severity=Severity.HIGH)]),
            ScanResult(source="broken.rs", error="Failed to parse Rust source code"),
        ]
    )
    assert report.failed_files == ["broken.rs"]
    assert report.severity_counts["high"] == 1
    assert report.severity_counts["info"] == 0
    assert report.storage_savings.unused_field_count == 1


def test_json_uses_camel_case_aliases():
    result = ScanResult(source="a.rs", violations=[_violation()])
    data = json.loads(result.to_json())
    assert set(data) == {"source", "violations", "scanTime", "error"}
    assert set(data["violations"][0]) == {
        "ruleId",
        "description",
        "severity",
        "lineNumber",
        "columnNumber",
        "subjectName",
        "suggestion",
    }
    assert data["violations"][0]["severity"] == "warning"

    report = json.loads(Report(results=[result]).to_json())
    assert report["totalViolations"] == 1
    assert report["storageSavings"]["estimatedKB"] == 2.5


def test_summarize():
    assert summarize([]) == "No issues found"
    text = summarize([_violation(), _violation(severity=Severity.HIGH)])
    assert text == "2 issues found (1 high, 1 warning)"
