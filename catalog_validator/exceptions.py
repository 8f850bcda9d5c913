"""
Custom exception hierarchy for catalog validation.

Only FATAL conditions are exceptions. Shape, referential and uniqueness
defects are reported as findings and never interrupt the pass.
"""

from __future__ import annotations

from pathlib import Path


class CatalogValidationError(Exception):
    """Base exception for all fatal catalog validation failures."""

    def __init__(self, code: str, message: str, details: dict | None = None):
        self.code = code
        self.details = details or {}
        super().__init__(message)


class DocumentLoadError(CatalogValidationError):
    """A document could not be read or is not valid JSON."""

    def __init__(self, path: str | Path, message: str, reason: str):
        self.path = Path(path)
        super().__init__(
            "DOCUMENT_LOAD_FAILED",
            message,
            {"path": str(path), "reason": reason},
        )


class ResultsShapeError(CatalogValidationError):
    """The results document parsed, but is not a JSON array."""

    def __init__(self, path: str | Path, actual_type: str):
        self.path = Path(path)
        super().__init__(
            "RESULTS_NOT_ARRAY",
            f"results.json must be an array at {path}",
            {"path": str(path), "actual_type": actual_type},
        )
