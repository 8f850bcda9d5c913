"""
Streaming reporter — prints every finding the moment it is recorded.

One Reporter is created per run, passed by reference into the taxonomy
index builder and the entry pass, and finalized with finish(). The
accumulated ValidationReport replaces a process-wide failure flag.
"""

from __future__ import annotations

import sys
from typing import Iterable

from .models import Severity, ValidationFinding, ValidationReport

FAIL_PREFIX = "❌ "
WARN_PREFIX = "⚠️  "
PASSED_BANNER = "✅ Validation passed."
FAILED_BANNER = "\nValidation failed."


class Reporter:
    """Collects findings into a report and echoes them as they arrive.

    sys.stdout / sys.stderr are looked up at print time, so output capture
    (pytest's capsys, redirect_stdout) works as expected.
    """

    def __init__(self, report: ValidationReport | None = None):
        self.report = report or ValidationReport()
        self._finished = False

    @property
    def failed(self) -> bool:
        return not self.report.is_valid

    def fail(self, finding: ValidationFinding) -> None:
        """Record an ERROR finding and print it immediately."""
        if finding.severity != Severity.ERROR:
            finding = finding.model_copy(update={"severity": Severity.ERROR})
        self.report.findings.append(finding)
        print(f"{FAIL_PREFIX}{finding.message}", file=sys.stderr)

    def warn(self, finding: ValidationFinding) -> None:
        """Record a WARNING finding. Warnings never change the exit status."""
        if finding.severity != Severity.WARNING:
            finding = finding.model_copy(update={"severity": Severity.WARNING})
        self.report.findings.append(finding)
        print(f"{WARN_PREFIX}{finding.message}", file=sys.stderr)

    def record(self, findings: Iterable[ValidationFinding]) -> None:
        """Dispatch a batch of findings by severity, preserving order."""
        for finding in findings:
            if finding.severity == Severity.WARNING:
                self.warn(finding)
            else:
                self.fail(finding)

    def abort(self, finding: ValidationFinding) -> None:
        """Record a fatal finding; no further checks will run."""
        self.fail(finding)
        self.report.aborted = True

    def finish(self) -> int:
        """Print the closing banner and return the process exit code."""
        if self._finished:
            raise RuntimeError("Reporter.finish() called twice for the same run")
        self._finished = True

        if self.failed:
            print(FAILED_BANNER, file=sys.stderr)
            return self.report.exit_code

        print(PASSED_BANNER, file=sys.stdout)
        return 0
