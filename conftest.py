"""Pytest configuration — ensures the project root is importable and provides catalog fixtures."""

import json
import sys
from pathlib import Path
from typing import Any

import pytest

sys.path.insert(0, str(Path(__file__).parent))

from catalog_validator.config import ValidatorSettings  # noqa: E402


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    """Keep a developer's shell / .env overrides out of the suite."""
    for name in ("CATALOG_TAXONOMY_PATH", "CATALOG_RESULTS_PATH", "CATALOG_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def taxonomy_doc() -> dict[str, Any]:
    """A valid taxonomy: two categories, three subcategories, three tags."""
    return {
        "tags": ["cli", "storage", "web"],
        "categories": {
            "definitions": [
                {
                    "id": "c1",
                    "name": "Core",
                    "subcategories": [
                        {"id": "s1", "name": "Sub1"},
                        {"id": "s2", "name": "Sub2"},
                    ],
                },
                {
                    "id": "c2",
                    "name": "Tooling",
                    "subcategories": [{"id": "s3", "name": "Sub3"}],
                },
            ]
        },
    }


@pytest.fixture
def valid_entry() -> dict[str, Any]:
    return {
        "name": "X",
        "description": "Y",
        "website": "https://x.com",
        "tags": ["cli"],
        "subcategory_id": "s1",
    }


@pytest.fixture
def write_catalog(tmp_path):
    """Write taxonomy/results documents and return settings pointing at them.

    Strings are written verbatim (for malformed-JSON cases); anything else
    is serialised with json.dumps.
    """

    def _write(taxonomy: Any, results: Any) -> ValidatorSettings:
        catalog = tmp_path / "catalog"
        catalog.mkdir(exist_ok=True)
        paths = {"taxonomy": catalog / "taxonomy.json", "results": catalog / "resources.json"}
        for key, doc in (("taxonomy", taxonomy), ("results", results)):
            text = doc if isinstance(doc, str) else json.dumps(doc)
            paths[key].write_text(text, encoding="utf-8")
        return ValidatorSettings(
            taxonomy_path=paths["taxonomy"], results_path=paths["results"]
        )

    return _write
