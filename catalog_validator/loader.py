"""
Document loading — both JSON documents are read concurrently.

Reads are blocking file I/O, so each runs in a worker thread via
asyncio.to_thread; both are started before either is awaited. A failure
in one load never prevents the other from completing, so both load
errors can be reported together.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

from .exceptions import DocumentLoadError

logger = logging.getLogger(__name__)


def load_json_document(path: str | Path) -> Any:
    """Read a file as UTF-8 text and parse it as JSON.

    Raises:
        DocumentLoadError: the file is unreadable or not valid JSON.
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentLoadError(path, f"Could not read {path}: {e}", str(e)) from e

    try:
        document = json.loads(raw)
    except json.JSONDecodeError as e:
        raise DocumentLoadError(path, f"Invalid JSON at {path}: {e}", str(e)) from e

    logger.debug("Loaded %s (%d bytes)", path, len(raw))
    return document


async def _load_both(taxonomy_path: Path, results_path: Path) -> list[Any]:
    return await asyncio.gather(
        asyncio.to_thread(load_json_document, taxonomy_path),
        asyncio.to_thread(load_json_document, results_path),
        return_exceptions=True,
    )


def load_documents(
    taxonomy_path: str | Path, results_path: str | Path
) -> tuple[Any, Any, list[DocumentLoadError]]:
    """Load the taxonomy and results documents concurrently.

    Returns:
        (taxonomy, results, errors). A document that failed to load is None
        and its DocumentLoadError is in errors, taxonomy's first.
    """
    logger.info("Loading %s and %s", taxonomy_path, results_path)
    outcomes = asyncio.run(_load_both(Path(taxonomy_path), Path(results_path)))

    documents: list[Any] = []
    errors: list[DocumentLoadError] = []
    for outcome in outcomes:
        if isinstance(outcome, DocumentLoadError):
            errors.append(outcome)
            documents.append(None)
        elif isinstance(outcome, BaseException):
            raise outcome
        else:
            documents.append(outcome)

    return documents[0], documents[1], errors
