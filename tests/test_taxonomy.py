"""
Tests for the taxonomy index builder: lookup tables, uniqueness and
best-effort recovery from malformed taxonomy documents.
"""

from __future__ import annotations

import copy

import pytest

from catalog_validator.models import ParentCategory
from catalog_validator.reporter import Reporter
from catalog_validator.taxonomy import build_taxonomy_index


def _build(taxonomy):
    reporter = Reporter()
    index = build_taxonomy_index(taxonomy, reporter, source="catalog/taxonomy.json")
    return index, [f.code for f in reporter.report.findings], reporter


# ═══════════════════════════════════════════════════════════════════════
# HAPPY PATH
# ═══════════════════════════════════════════════════════════════════════


class TestIndexContents:
    def test_valid_taxonomy_has_no_findings(self, taxonomy_doc):
        _, codes, _ = _build(taxonomy_doc)
        assert codes == []

    def test_allowed_tags(self, taxonomy_doc):
        index, _, _ = _build(taxonomy_doc)
        assert index.allowed_tags == {"cli", "storage", "web"}

    def test_tags_are_trimmed(self, taxonomy_doc):
        taxonomy_doc["tags"] = [" cli ", "web"]
        index, codes, _ = _build(taxonomy_doc)
        assert codes == []
        assert index.allowed_tags == {"cli", "web"}

    def test_tag_trimming_removes_bom_and_nbsp(self, taxonomy_doc):
        taxonomy_doc["tags"] = ["\ufeffcli\u00a0", "web"]
        index, codes, _ = _build(taxonomy_doc)
        assert codes == []
        assert index.allowed_tags == {"cli", "web"}

    def test_category_ids_and_names_share_one_set(self, taxonomy_doc):
        index, _, _ = _build(taxonomy_doc)
        assert index.category_identifiers == {"c1", "Core", "c2", "Tooling"}

    def test_subcategory_parents(self, taxonomy_doc):
        index, _, _ = _build(taxonomy_doc)
        assert index.subcategory_ids == {"s1", "s2", "s3"}
        assert index.parent_of("s3") == ParentCategory(id="c2", name="Tooling")
        assert index.parent_of("nope") is None


# ═══════════════════════════════════════════════════════════════════════
# UNIQUENESS
# ═══════════════════════════════════════════════════════════════════════


class TestUniqueness:
    def test_duplicate_category_id(self, taxonomy_doc):
        taxonomy_doc["categories"]["definitions"][1]["id"] = "c1"
        _, codes, reporter = _build(taxonomy_doc)
        assert codes == ["DUPLICATE_CATEGORY_ID"]
        assert reporter.report.findings[0].message == (
            'taxonomy.categories.definitions[1].id is duplicated: "c1"'
        )

    def test_duplicate_category_name(self, taxonomy_doc):
        taxonomy_doc["categories"]["definitions"][1]["name"] = "Core"
        _, codes, _ = _build(taxonomy_doc)
        assert codes == ["DUPLICATE_CATEGORY_NAME"]

    def test_duplicate_subcategory_across_parents(self, taxonomy_doc):
        taxonomy_doc["categories"]["definitions"][1]["subcategories"][0]["id"] = "s1"
        index, codes, reporter = _build(taxonomy_doc)
        assert codes == ["DUPLICATE_SUBCATEGORY_ID"]
        assert "duplicated across taxonomy" in reporter.report.findings[0].message
        # First occurrence stays authoritative.
        assert index.parent_of("s1").id == "c1"

    def test_duplicate_subcategory_within_parent(self, taxonomy_doc):
        taxonomy_doc["categories"]["definitions"][0]["subcategories"][1]["id"] = "s1"
        _, codes, _ = _build(taxonomy_doc)
        assert codes == ["DUPLICATE_SUBCATEGORY_ID"]


# ═══════════════════════════════════════════════════════════════════════
# MALFORMED TAXONOMY (BEST EFFORT)
# ═══════════════════════════════════════════════════════════════════════


class TestMalformedTaxonomy:
    @pytest.mark.parametrize("tags", [None, "cli", ["cli", ""], ["cli", 3]])
    def test_bad_tags_empty_the_allowed_set(self, taxonomy_doc, tags):
        taxonomy_doc["tags"] = tags
        index, codes, reporter = _build(taxonomy_doc)
        assert codes == ["TAXONOMY_TAGS_INVALID"]
        assert index.allowed_tags == frozenset()
        assert "catalog/taxonomy.json" in reporter.report.findings[0].message

    def test_definitions_not_array(self, taxonomy_doc):
        taxonomy_doc["categories"]["definitions"] = {"id": "c1"}
        index, codes, _ = _build(taxonomy_doc)
        assert codes == ["TAXONOMY_DEFINITIONS_INVALID"]
        assert index.subcategory_ids == frozenset()

    def test_non_object_taxonomy(self):
        index, codes, _ = _build(["cli"])
        assert codes == ["TAXONOMY_TAGS_INVALID", "TAXONOMY_DEFINITIONS_INVALID"]
        assert index.category_identifiers == frozenset()

    def test_category_not_object_is_skipped(self, taxonomy_doc):
        taxonomy_doc["categories"]["definitions"].insert(0, "c0")
        index, codes, _ = _build(taxonomy_doc)
        assert codes == ["CATEGORY_NOT_OBJECT"]
        assert index.subcategory_ids == {"s1", "s2", "s3"}

    def test_missing_category_id_skips_category(self, taxonomy_doc):
        del taxonomy_doc["categories"]["definitions"][1]["id"]
        index, codes, _ = _build(taxonomy_doc)
        assert codes == ["CATEGORY_ID_INVALID"]
        assert "s3" not in index.subcategory_ids
        assert "Tooling" not in index.category_identifiers

    def test_missing_category_name_skips_category(self, taxonomy_doc):
        taxonomy_doc["categories"]["definitions"][1]["name"] = ""
        index, codes, _ = _build(taxonomy_doc)
        assert codes == ["CATEGORY_NAME_INVALID"]
        assert "c2" not in index.category_identifiers

    def test_empty_subcategories(self, taxonomy_doc):
        taxonomy_doc["categories"]["definitions"][1]["subcategories"] = []
        index, codes, _ = _build(taxonomy_doc)
        assert codes == ["SUBCATEGORIES_INVALID"]
        # The category itself is still a valid identifier.
        assert "c2" in index.category_identifiers

    def test_subcategory_without_name_is_still_registered(self, taxonomy_doc):
        del taxonomy_doc["categories"]["definitions"][0]["subcategories"][0]["name"]
        index, codes, _ = _build(taxonomy_doc)
        assert codes == ["SUBCATEGORY_NAME_INVALID"]
        assert "s1" in index.subcategory_ids

    def test_subcategory_without_id_is_skipped(self, taxonomy_doc):
        taxonomy_doc["categories"]["definitions"][0]["subcategories"][0]["id"] = "  "
        index, codes, _ = _build(taxonomy_doc)
        assert codes == ["SUBCATEGORY_ID_INVALID"]
        assert index.subcategory_ids == {"s2", "s3"}

    def test_subcategory_not_object(self, taxonomy_doc):
        taxonomy_doc["categories"]["definitions"][1]["subcategories"].append(None)
        _, codes, _ = _build(taxonomy_doc)
        assert codes == ["SUBCATEGORY_NOT_OBJECT"]

    def test_every_defect_reported_in_one_pass(self, taxonomy_doc):
        broken = copy.deepcopy(taxonomy_doc)
        broken["tags"] = [""]
        broken["categories"]["definitions"][1]["id"] = "c1"
        broken["categories"]["definitions"][1]["name"] = "Core"
        broken["categories"]["definitions"][1]["subcategories"][0]["id"] = "s2"
        _, codes, reporter = _build(broken)
        assert codes == [
            "TAXONOMY_TAGS_INVALID",
            "DUPLICATE_CATEGORY_ID",
            "DUPLICATE_CATEGORY_NAME",
            "DUPLICATE_SUBCATEGORY_ID",
        ]
        assert reporter.failed is True
