"""
Taxonomy index builder.

One forward pass over the taxonomy produces every lookup table the entry
checks need, so each entry reference resolves in O(1) instead of
re-scanning the taxonomy.

Defects found here are reported and the pass continues on best-effort
data:
  - malformed tag list      → allowed tag set is empty
  - malformed definitions   → no categories
  - duplicate id / name     → first occurrence wins, later ones are flagged
"""

from __future__ import annotations

import logging
from typing import Any

from .models import ParentCategory, TaxonomyIndex, ValidationFinding
from .reporter import Reporter
from .validators import is_non_empty_string, trim

logger = logging.getLogger(__name__)


def build_taxonomy_index(
    taxonomy: Any, reporter: Reporter, source: str = "taxonomy.json"
) -> TaxonomyIndex:
    """Validate the taxonomy and build its lookup tables.

    Args:
        taxonomy: The parsed taxonomy document.
        reporter: Receives every defect as soon as it is found.
        source: Document path used in diagnostics.

    Returns:
        TaxonomyIndex with allowed tags, category ids/names and the
        subcategory → parent mapping.
    """
    if not isinstance(taxonomy, dict):
        taxonomy = {}

    allowed_tags = _index_tags(taxonomy.get("tags"), reporter, source)

    categories = taxonomy.get("categories")
    definitions = categories.get("definitions") if isinstance(categories, dict) else None
    if not isinstance(definitions, list):
        reporter.fail(
            ValidationFinding(
                code="TAXONOMY_DEFINITIONS_INVALID",
                field="taxonomy.categories.definitions",
                message=f"taxonomy.categories.definitions must be an array in {source}",
                details={"path": source},
            )
        )
        definitions = []

    seen_category_ids: set[str] = set()
    seen_category_names: set[str] = set()
    category_identifiers: set[str] = set()
    subcategory_parents: dict[str, ParentCategory] = {}

    for i, category in enumerate(definitions):
        where = f"taxonomy.categories.definitions[{i}]"
        parent = _index_category(
            category, where, reporter, seen_category_ids, seen_category_names
        )
        if parent is None:
            continue

        category_identifiers.add(parent.id)
        category_identifiers.add(parent.name)

        subcategories = category.get("subcategories")
        if not isinstance(subcategories, list) or len(subcategories) < 1:
            reporter.fail(
                ValidationFinding(
                    code="SUBCATEGORIES_INVALID",
                    field=f"{where}.subcategories",
                    message=f"{where}.subcategories must be a non-empty array",
                )
            )
            continue

        for j, subcategory in enumerate(subcategories):
            _index_subcategory(
                subcategory,
                f"{where}.subcategories[{j}]",
                parent,
                reporter,
                subcategory_parents,
            )

    logger.debug(
        "Taxonomy index: %d tags, %d categories, %d subcategories",
        len(allowed_tags),
        len(seen_category_ids),
        len(subcategory_parents),
    )
    return TaxonomyIndex(
        allowed_tags=frozenset(allowed_tags),
        category_identifiers=frozenset(category_identifiers),
        subcategory_parents=subcategory_parents,
    )


# ─── Internal Helpers ────────────────────────────────────────────────


def _index_tags(tags: Any, reporter: Reporter, source: str) -> set[str]:
    if not isinstance(tags, list) or not all(is_non_empty_string(t) for t in tags):
        reporter.fail(
            ValidationFinding(
                code="TAXONOMY_TAGS_INVALID",
                field="taxonomy.tags",
                message=f"taxonomy.tags must be an array of non-empty strings in {source}",
                details={"path": source},
            )
        )
        return set()
    return {trim(t) for t in tags}


def _index_category(
    category: Any,
    where: str,
    reporter: Reporter,
    seen_ids: set[str],
    seen_names: set[str],
) -> ParentCategory | None:
    """Check one category's id and name. Returns None if it must be skipped."""
    if not isinstance(category, dict):
        reporter.fail(
            ValidationFinding(
                code="CATEGORY_NOT_OBJECT",
                field=where,
                message=f"{where} must be an object",
            )
        )
        return None

    category_id = category.get("id")
    if not is_non_empty_string(category_id):
        reporter.fail(
            ValidationFinding(
                code="CATEGORY_ID_INVALID",
                field=f"{where}.id",
                message=f"{where}.id must be a non-empty string",
            )
        )
        return None
    if category_id in seen_ids:
        reporter.fail(
            ValidationFinding(
                code="DUPLICATE_CATEGORY_ID",
                field=f"{where}.id",
                message=f'{where}.id is duplicated: "{category_id}"',
                details={"id": category_id},
            )
        )
    seen_ids.add(category_id)

    category_name = category.get("name")
    if not is_non_empty_string(category_name):
        reporter.fail(
            ValidationFinding(
                code="CATEGORY_NAME_INVALID",
                field=f"{where}.name",
                message=f"{where}.name must be a non-empty string",
            )
        )
        return None
    if category_name in seen_names:
        reporter.fail(
            ValidationFinding(
                code="DUPLICATE_CATEGORY_NAME",
                field=f"{where}.name",
                message=f'{where}.name is duplicated: "{category_name}"',
                details={"name": category_name},
            )
        )
    seen_names.add(category_name)

    return ParentCategory(id=category_id, name=category_name)


def _index_subcategory(
    subcategory: Any,
    where: str,
    parent: ParentCategory,
    reporter: Reporter,
    subcategory_parents: dict[str, ParentCategory],
) -> None:
    """Register one subcategory. Ids are unique across the whole taxonomy."""
    if not isinstance(subcategory, dict):
        reporter.fail(
            ValidationFinding(
                code="SUBCATEGORY_NOT_OBJECT",
                field=where,
                message=f"{where} must be an object",
            )
        )
        return

    subcategory_id = subcategory.get("id")
    if not is_non_empty_string(subcategory_id):
        reporter.fail(
            ValidationFinding(
                code="SUBCATEGORY_ID_INVALID",
                field=f"{where}.id",
                message=f"{where}.id must be a non-empty string",
            )
        )
        return

    # A missing name is reported but the subcategory stays usable.
    if not is_non_empty_string(subcategory.get("name")):
        reporter.fail(
            ValidationFinding(
                code="SUBCATEGORY_NAME_INVALID",
                field=f"{where}.name",
                message=f"{where}.name must be a non-empty string",
            )
        )

    existing = subcategory_parents.get(subcategory_id)
    if existing is not None:
        reporter.fail(
            ValidationFinding(
                code="DUPLICATE_SUBCATEGORY_ID",
                field=f"{where}.id",
                message=f'{where}.id is duplicated across taxonomy: "{subcategory_id}"',
                details={
                    "id": subcategory_id,
                    "first_parent": existing.id,
                    "parent": parent.id,
                },
            )
        )
        return

    subcategory_parents[subcategory_id] = parent
