"""
Main validation pipeline — orchestrates the full workflow.

Flow:
  ┌──────────┐   ┌──────────┐
  │ Taxonomy │   │ Results  │   ← Loaded concurrently
  │   load   │   │   load   │
  └────┬─────┘   └────┬─────┘
       │              │          (any load error → report all, abort)
  ┌────▼─────┐        │
  │  Index   │        │          ← Tags, category ids/names, sub → parent
  │  build   │        │
  └────┬─────┘        │
       └──────┬───────┘
              │                  (results not an array → abort)
       ┌──────▼──────┐
       │ Entry checks│           ← Pure per-field checks, every entry
       └──────┬──────┘
              │
       ┌──────▼──────┐
       │  Reporter   │           ← Streams findings, banner, exit code
       └─────────────┘

Design principles:
  - Shape, reference and uniqueness defects never stop the pass.
  - Only unreadable documents or a non-array results document abort.
  - The Reporter lives for exactly one run.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from .config import ValidatorSettings
from .exceptions import CatalogValidationError, ResultsShapeError
from .loader import load_documents
from .models import ValidationFinding, ValidationReport
from .reporter import Reporter
from .taxonomy import build_taxonomy_index
from .validators import validate_results

logger = logging.getLogger(__name__)


class CatalogValidationPipeline:
    """Orchestrates the full catalog validation workflow.

    Usage:
        pipeline = CatalogValidationPipeline()
        report = pipeline.run()
        sys.exit(report.exit_code)
    """

    def __init__(self, settings: ValidatorSettings | None = None):
        self.settings = settings or ValidatorSettings()

    def run(self) -> ValidationReport:
        """Load both documents from disk and validate them."""
        taxonomy_path = self.settings.taxonomy_path
        results_path = self.settings.results_path
        reporter = self._new_reporter(taxonomy_path, results_path)

        # ── Step 1: Concurrent load ─────────────────────────────────
        taxonomy, results, errors = load_documents(taxonomy_path, results_path)
        if errors:
            for error in errors:
                self._report_fatal(reporter, error)
            reporter.finish()
            return reporter.report

        return self._validate(reporter, taxonomy, results)

    def run_documents(self, taxonomy: Any, results: Any) -> ValidationReport:
        """Validate already-parsed documents (no file I/O)."""
        reporter = self._new_reporter(
            self.settings.taxonomy_path, self.settings.results_path
        )
        return self._validate(reporter, taxonomy, results)

    # ─── Validation Pass ─────────────────────────────────────────────

    def _validate(
        self, reporter: Reporter, taxonomy: Any, results: Any
    ) -> ValidationReport:
        # ── Step 2: Taxonomy index ──────────────────────────────────
        logger.info("Building taxonomy index...")
        index = build_taxonomy_index(
            taxonomy, reporter, source=str(self.settings.taxonomy_path)
        )

        # ── Step 3: Results must be an array ────────────────────────
        if not isinstance(results, list):
            self._report_fatal(
                reporter,
                ResultsShapeError(self.settings.results_path, type(results).__name__),
            )
            reporter.finish()
            return reporter.report

        # ── Step 4: Entry checks, streamed per entry ────────────────
        logger.info("Validating %d entries...", len(results))
        for position, findings in validate_results(results, index):
            reporter.record(findings)
            reporter.report.entries_checked = position + 1

        # ── Step 5: Banner + exit status ────────────────────────────
        reporter.finish()
        logger.info(
            "Done: %d entries, %d error(s), %d warning(s)",
            reporter.report.entries_checked,
            reporter.report.error_count,
            reporter.report.warning_count,
        )
        return reporter.report

    # ─── Helpers ─────────────────────────────────────────────────────

    @staticmethod
    def _new_reporter(taxonomy_path: Path, results_path: Path) -> Reporter:
        return Reporter(
            ValidationReport(taxonomy_path=taxonomy_path, results_path=results_path)
        )

    @staticmethod
    def _report_fatal(reporter: Reporter, error: CatalogValidationError) -> None:
        """Convert a fatal exception into an ERROR finding and mark the run aborted."""
        logger.info("Aborting: %s", error.code)
        reporter.abort(
            ValidationFinding(
                code=error.code,
                field=error.details.get("path", ""),
                message=str(error),
                details=error.details,
            )
        )
