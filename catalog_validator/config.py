"""
Runtime configuration, read from the environment.

The entry point calls python-dotenv's load_dotenv() first, so every
variable below may also live in a local .env file.

    CATALOG_TAXONOMY_PATH   taxonomy document (default catalog/taxonomy.json)
    CATALOG_RESULTS_PATH    results document  (default catalog/resources.json)
    CATALOG_LOG_LEVEL       logging level     (default WARNING)
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from pydantic import BaseModel, field_validator

DEFAULT_TAXONOMY_PATH = Path("catalog") / "taxonomy.json"
DEFAULT_RESULTS_PATH = Path("catalog") / "resources.json"


class ValidatorSettings(BaseModel):
    """Where the two documents live and how verbose the run is."""

    taxonomy_path: Path = DEFAULT_TAXONOMY_PATH
    results_path: Path = DEFAULT_RESULTS_PATH
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value!r}")
        return level

    @classmethod
    def from_env(cls, root: str | Path | None = None) -> "ValidatorSettings":
        """Build settings from environment variables.

        Args:
            root: Directory relative paths resolve against. Defaults to the
                current working directory.
        """
        base = Path.cwd() if root is None else Path(root)
        taxonomy = Path(os.environ.get("CATALOG_TAXONOMY_PATH") or DEFAULT_TAXONOMY_PATH)
        results = Path(os.environ.get("CATALOG_RESULTS_PATH") or DEFAULT_RESULTS_PATH)

        return cls(
            taxonomy_path=(base / taxonomy).resolve(),
            results_path=(base / results).resolve(),
            log_level=os.environ.get("CATALOG_LOG_LEVEL") or "WARNING",
        )
