"""
Scan Result Models — per-file results, aggregate report, and API schemas.

JSON output uses camelCase aliases (`scanTime`, `ruleId`, ...) so the
machine-readable shape stays stable for downstream tooling.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

from gasguard.models.rule_models import Severity, Violation


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ScanResult(BaseModel):
    """Violations found in one scanned file."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    source: str = Field(..., description="Path or label of the scanned source")
    violations: list[Violation] = Field(default_factory=list)
    scan_time: datetime = Field(default_factory=_utcnow)
    error: str | None = Field(
        default=None, description="Failure message when the file could not be scanned"
    )

    @property
    def failed(self) -> bool:
        return self.error is not None

    def has_violations(self) -> bool:
        return bool(self.violations)

    def violations_by_severity(self, severity: Severity) -> list[Violation]:
        return [v for v in self.violations if v.severity == severity]

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)


class StorageSavings(BaseModel):
    """Estimated ledger storage saved by removing unused fields."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    unused_field_count: int = 0
    estimated_kb: float = Field(default=0.0, alias="estimatedKB")
    estimated_monthly_rent: float = 0.0


class CategorizedViolations(BaseModel):
    """Violations partitioned into presentation tiers."""

    errors: list[Violation] = Field(default_factory=list)
    warnings: list[Violation] = Field(default_factory=list)
    info: list[Violation] = Field(default_factory=list)


class Report(BaseModel):
    """Ordered collection of scan results plus derived aggregate metrics."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    results: list[ScanResult] = Field(default_factory=list)

    @property
    def violations(self) -> list[Violation]:
        return [v for r in self.results for v in r.violations]

    @computed_field
    @property
    def total_violations(self) -> int:
        return sum(len(r.violations) for r in self.results)

    @computed_field
    @property
    def severity_counts(self) -> dict[str, int]:
        counts = {s.value: 0 for s in Severity}
        for v in self.violations:
            counts[v.severity.value] += 1
        return counts

    @computed_field
    @property
    def failed_files(self) -> list[str]:
        return [r.source for r in self.results if r.failed]

    @computed_field
    @property
    def storage_savings(self) -> StorageSavings:
        # Local import: report helpers depend on these models
        from gasguard.core.report import storage_savings

        return storage_savings(self.violations)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)


# ── API schemas ──


class FileInput(BaseModel):
    """A single contract submitted for scanning."""

    path: str = Field(..., description="File name; its extension selects the format")
    content: str = Field(..., description="Contract source content")


class ScanRequest(FileInput):
    """Request body for /scan."""

    engine: Literal["grammar", "heuristic", "all"] | None = Field(
        default=None, description="Override the configured engine for .rs files"
    )


class BatchScanRequest(BaseModel):
    """Request body for /scan-batch."""

    files: list[FileInput] = Field(default_factory=list)
    engine: Literal["grammar", "heuristic", "all"] | None = None


class ScanResponse(BaseModel):
    """Response of /scan: one result plus its storage estimate."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    message: str = "scan_complete"
    result: ScanResult
    storage_savings: StorageSavings
    summary: str = ""
