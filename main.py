#!/usr/bin/env python3
"""
Catalog Validator — Entry Point
===============================

Validates catalog/resources.json against catalog/taxonomy.json, both
resolved relative to the current working directory.

Usage:
    python main.py                                     # default paths
    CATALOG_RESULTS_PATH=other.json python main.py     # override via env / .env
    CATALOG_LOG_LEVEL=INFO python main.py              # show progress logging

Exit status is 0 when the catalog is valid, 1 otherwise.
"""

from __future__ import annotations

import logging
import sys

from dotenv import load_dotenv
from pydantic import ValidationError

from catalog_validator import __version__
from catalog_validator.config import ValidatorSettings
from catalog_validator.models import ValidationFinding
from catalog_validator.pipeline import CatalogValidationPipeline
from catalog_validator.reporter import Reporter

logger = logging.getLogger("catalog_validator")


def _report_bad_settings(error: ValidationError) -> int:
    """Report invalid environment configuration like any fatal finding."""
    reporter = Reporter()
    for problem in error.errors():
        field = ".".join(str(part) for part in problem["loc"])
        reporter.abort(
            ValidationFinding(
                code="CONFIG_INVALID",
                field=field,
                message=f"Invalid configuration for {field}: {problem['msg']}",
                details={"input": str(problem.get("input"))},
            )
        )
    return reporter.finish()


def main() -> None:
    """Run the validation pipeline and exit with its status."""
    load_dotenv()
    try:
        settings = ValidatorSettings.from_env()
    except ValidationError as e:
        sys.exit(_report_bad_settings(e))

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    logger.info(
        "Catalog Validator %s: %s against %s",
        __version__,
        settings.results_path,
        settings.taxonomy_path,
    )
    report = CatalogValidationPipeline(settings).run()
    sys.exit(report.exit_code)


if __name__ == "__main__":
    main()
