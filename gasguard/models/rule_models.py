"""
Rule Engine Data Models — Severities, violations, and rule metadata.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Severity(str, Enum):
    """Single totally ordered severity scale: info < warning < medium < high < error."""

    INFO = "info"
    WARNING = "warning"
    MEDIUM = "medium"
    HIGH = "high"
    ERROR = "error"

    @property
    def rank(self) -> int:
        return SEVERITY_RANK[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank


SEVERITY_RANK: dict[Severity, int] = {
    Severity.INFO: 0,
    Severity.WARNING: 1,
    Severity.MEDIUM: 2,
    Severity.HIGH: 3,
    Severity.ERROR: 4,
}


class Violation(BaseModel):
    """A single detected issue. Immutable once a rule emits it."""

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    rule_id: str = Field(..., description="Rule identifier, e.g. 'unused-state-variable'")
    description: str
    severity: Severity
    line_number: int = Field(default=0, description="1-based line, 0 when unknown")
    column_number: int = Field(default=0, description="1-based column, 0 when unknown")
    subject_name: str = Field(
        default="", description="Field, function or contract the violation is about"
    )
    suggestion: str = ""


class RuleInfo(BaseModel):
    """Public metadata of a registered rule."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    display_name: str
    description: str
    severity: Severity
    enabled: bool
    engine: str = ""
