"""
Pydantic models for findings, the taxonomy index and the final report.

Raw catalog documents stay plain JSON values: every field check must be able
to report a defect and keep going, which a strict model would not allow.
What we DERIVE from them is typed.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field


# ─── Severity Levels ────────────────────────────────────────────────


class Severity(str, Enum):
    """Severity of a validation finding."""

    ERROR = "ERROR"  # Fails the run
    WARNING = "WARNING"  # Advisory only, exit status unaffected


# ─── Validation Finding ─────────────────────────────────────────────


class ValidationFinding(BaseModel):
    """A single validation finding with severity, machine-readable code, and details."""

    severity: Severity = Severity.ERROR
    code: str  # Machine-readable, e.g. "UNKNOWN_TAG"
    field: str  # Document path, e.g. "results[3].tags"
    message: str  # Human-readable line, printed as-is
    details: dict = Field(default_factory=dict)


# ─── Taxonomy Index ─────────────────────────────────────────────────


class ParentCategory(BaseModel):
    """The category that owns a subcategory."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str


class TaxonomyIndex(BaseModel):
    """Lookup tables built in one forward pass over the taxonomy."""

    model_config = ConfigDict(frozen=True)

    allowed_tags: frozenset[str] = frozenset()
    category_identifiers: frozenset[str] = frozenset()  # ids AND names
    subcategory_parents: dict[str, ParentCategory] = Field(default_factory=dict)

    @property
    def subcategory_ids(self) -> frozenset[str]:
        return frozenset(self.subcategory_parents)

    def parent_of(self, subcategory_id: str) -> ParentCategory | None:
        return self.subcategory_parents.get(subcategory_id)


# ─── Validation Report ──────────────────────────────────────────────


class ValidationReport(BaseModel):
    """The final output of one validation run."""

    taxonomy_path: Optional[Path] = None
    results_path: Optional[Path] = None
    findings: list[ValidationFinding] = Field(default_factory=list)
    entries_checked: int = 0
    aborted: bool = False  # A fatal condition stopped the run early

    @computed_field  # type: ignore[prop-decorator]
    @property
    def error_count(self) -> int:
        return sum(1 for f in self.findings if f.severity == Severity.ERROR)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def warning_count(self) -> int:
        return sum(1 for f in self.findings if f.severity == Severity.WARNING)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_valid(self) -> bool:
        return self.error_count == 0 and not self.aborted

    @property
    def exit_code(self) -> int:
        return 0 if self.is_valid else 1
