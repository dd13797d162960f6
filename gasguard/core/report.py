"""
Report Aggregation — merge results, categorize violations, estimate storage savings.
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable

from gasguard.models.rule_models import Severity, Violation
from gasguard.models.scan_models import (
    CategorizedViolations,
    Report,
    ScanResult,
    StorageSavings,
)

UNUSED_STATE_RULE_ID = "unused-state-variable"

# Rough per-entry footprint of a persisted field, and ledger rent per KB per month
KB_PER_UNUSED_FIELD = 2.5
RENT_PER_KB_MONTH = 0.001

_ERROR_TIER = {Severity.ERROR, Severity.HIGH}
_WARNING_TIER = {Severity.WARNING, Severity.MEDIUM}


def merge(report: Report, result: ScanResult) -> Report:
    """Return a new Report with `result` appended; existing order is kept."""
    return Report(results=[*report.results, result])


def categorize(violations: Iterable[Violation]) -> CategorizedViolations:
    """Partition violations into errors (error, high), warnings (warning, medium) and info."""
    categorized = CategorizedViolations()
    for v in violations:
        if v.severity in _ERROR_TIER:
            categorized.errors.append(v)
        elif v.severity in _WARNING_TIER:
            categorized.warnings.append(v)
        else:
            categorized.info.append(v)
    return categorized


def storage_savings(violations: Iterable[Violation]) -> StorageSavings:
    """Estimate ledger storage freed by removing every unused state variable."""
    count = sum(1 for v in violations if v.rule_id == UNUSED_STATE_RULE_ID)
    estimated_kb = count * KB_PER_UNUSED_FIELD
    return StorageSavings(
        unused_field_count=count,
        estimated_kb=estimated_kb,
        estimated_monthly_rent=estimated_kb * RENT_PER_KB_MONTH,
    )


def summarize(violations: Iterable[Violation]) -> str:
    violations = list(violations)
    if not violations:
        return "No issues found"
    counts = Counter(v.severity for v in violations)
    parts = [
        f"{counts[s]} {s.value}"
        for s in sorted(counts, reverse=True)
    ]
    noun = "issue" if len(violations) == 1 else "issues"
    return f"{len(violations)} {noun} found ({', '.join(parts)})"
