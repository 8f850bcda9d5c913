"""
Deterministic entry checks — one pure function per field.

Each validator function:
  - Takes a catalog entry (a plain dict), its document path, and the
    TaxonomyIndex where references must resolve
  - Returns a list of ValidationFinding objects (empty = all clear)
  - Never raises, never stops early, and is independently testable

validate_entry() runs every check for one entry in a fixed order;
validate_results() walks the whole results array.
"""

from __future__ import annotations

from typing import Any, Iterator

from pydantic import AnyUrl, TypeAdapter, ValidationError

from .models import TaxonomyIndex, ValidationFinding

_URL_ADAPTER: TypeAdapter[AnyUrl] = TypeAdapter(AnyUrl)

ALLOWED_URL_SCHEMES: frozenset[str] = frozenset({"http", "https"})

# Space separators, ASCII controls \t..\r, line/paragraph separators and the BOM.
# Not str.strip(): that keeps U+FEFF and drops U+001C..U+001F and U+0085.
CATALOG_WHITESPACE = (
    "\t\n\v\f\r \u00a0\u1680"
    "\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a"
    "\u2028\u2029\u202f\u205f\u3000\ufeff"
)


# ─── Shape Predicates ────────────────────────────────────────────────


def trim(value: str) -> str:
    """Strip leading and trailing CATALOG_WHITESPACE."""
    return value.strip(CATALOG_WHITESPACE)


def is_non_empty_string(value: object) -> bool:
    """A str with at least one non-whitespace character."""
    return isinstance(value, str) and len(trim(value)) > 0


def is_optional_string(value: object) -> bool:
    return value is None or isinstance(value, str)


def is_valid_http_url(value: object) -> bool:
    """An absolute URL whose scheme is exactly http or https."""
    if not is_non_empty_string(value):
        return False
    try:
        url = _URL_ADAPTER.validate_python(value)
    except ValidationError:
        return False
    return url.scheme in ALLOWED_URL_SCHEMES


def _finding(code: str, field: str, message: str, **details: Any) -> ValidationFinding:
    return ValidationFinding(code=code, field=field, message=message, details=details)


# ─── Orchestrators ───────────────────────────────────────────────────


def validate_entry(
    entry: object, index: TaxonomyIndex, where: str
) -> list[ValidationFinding]:
    """Run ALL field checks for one entry and collect findings."""
    if not isinstance(entry, dict):
        return [
            _finding(
                "ENTRY_NOT_OBJECT",
                where,
                f"{where} must be an object",
                actual_type=type(entry).__name__,
            )
        ]

    findings: list[ValidationFinding] = []
    findings.extend(validate_name(entry, where))
    findings.extend(validate_description(entry, where))
    findings.extend(validate_llmstext(entry, where))
    findings.extend(validate_url_list(entry, where, "repos"))
    findings.extend(validate_url_list(entry, where, "packages"))
    findings.extend(validate_discoverability(entry, where))
    findings.extend(validate_tags(entry, where, index))
    findings.extend(validate_subcategory(entry, where, index))
    findings.extend(validate_category(entry, where, index))
    return findings


def validate_results(
    results: list[Any], index: TaxonomyIndex
) -> Iterator[tuple[int, list[ValidationFinding]]]:
    """Yield (position, findings) for every entry, in document order."""
    for i, entry in enumerate(results):
        yield i, validate_entry(entry, index, f"results[{i}]")


# ─── Individual Validators ───────────────────────────────────────────


def _validate_required_string(
    entry: dict, where: str, field: str
) -> list[ValidationFinding]:
    if is_non_empty_string(entry.get(field)):
        return []
    return [
        _finding(
            "FIELD_REQUIRED",
            f"{where}.{field}",
            f"{where}.{field} must be a non-empty string",
            value=entry.get(field),
        )
    ]


def validate_name(entry: dict, where: str) -> list[ValidationFinding]:
    return _validate_required_string(entry, where, "name")


def validate_description(entry: dict, where: str) -> list[ValidationFinding]:
    return _validate_required_string(entry, where, "description")


def validate_llmstext(entry: dict, where: str) -> list[ValidationFinding]:
    """llmstext is optional; null counts as absent."""
    if is_optional_string(entry.get("llmstext")):
        return []
    return [
        _finding(
            "FIELD_TYPE_INVALID",
            f"{where}.llmstext",
            f"{where}.llmstext must be a string if present",
            actual_type=type(entry["llmstext"]).__name__,
        )
    ]


def validate_url_list(entry: dict, where: str, field: str) -> list[ValidationFinding]:
    """Validate an optional array of http(s) URLs (used for repos and packages).

    Every element is checked; one bad URL does not hide the next.
    """
    value = entry.get(field)
    if value is None:
        return []

    if not isinstance(value, list):
        return [
            _finding(
                "FIELD_TYPE_INVALID",
                f"{where}.{field}",
                f"{where}.{field} must be an array if present",
                actual_type=type(value).__name__,
            )
        ]

    findings: list[ValidationFinding] = []
    for i, url in enumerate(value):
        if not is_valid_http_url(url):
            findings.append(
                _finding(
                    "INVALID_URL",
                    f"{where}.{field}[{i}]",
                    f"{where}.{field}[{i}] must be a valid http(s) URL",
                    value=url,
                )
            )
    return findings


def validate_discoverability(entry: dict, where: str) -> list[ValidationFinding]:
    """At least one of website, repos or packages must point somewhere."""
    repos = entry.get("repos")
    packages = entry.get("packages")

    has_website = is_non_empty_string(entry.get("website"))
    has_repos = isinstance(repos, list) and len(repos) > 0
    has_packages = isinstance(packages, list) and len(packages) > 0

    if has_website or has_repos or has_packages:
        return []
    return [
        _finding(
            "NOT_DISCOVERABLE",
            where,
            f"{where} must include at least one of website, repos, or packages",
        )
    ]


def validate_tags(
    entry: dict, where: str, index: TaxonomyIndex
) -> list[ValidationFinding]:
    """tags must be a non-empty array of known tags.

    A malformed element only skips the membership check for itself.
    """
    tags = entry.get("tags")
    if not isinstance(tags, list) or len(tags) < 1:
        return [
            _finding(
                "TAGS_EMPTY",
                f"{where}.tags",
                f"{where}.tags must be a non-empty array",
                value=tags,
            )
        ]

    findings: list[ValidationFinding] = []
    for i, tag in enumerate(tags):
        if not is_non_empty_string(tag):
            findings.append(
                _finding(
                    "TAG_INVALID",
                    f"{where}.tags[{i}]",
                    f"{where}.tags[{i}] must be a non-empty string",
                    value=tag,
                )
            )
            continue
        if tag not in index.allowed_tags:
            findings.append(
                _finding(
                    "UNKNOWN_TAG",
                    f"{where}.tags",
                    f'{where}.tags contains unknown tag "{tag}" (not in taxonomy.json)',
                    tag=tag,
                )
            )
    return findings


def validate_subcategory(
    entry: dict, where: str, index: TaxonomyIndex
) -> list[ValidationFinding]:
    subcategory_id = entry.get("subcategory_id")

    if not is_non_empty_string(subcategory_id):
        return [
            _finding(
                "FIELD_REQUIRED",
                f"{where}.subcategory_id",
                f"{where}.subcategory_id must be a non-empty string",
                value=subcategory_id,
            )
        ]

    if subcategory_id not in index.subcategory_parents:
        return [
            _finding(
                "UNKNOWN_SUBCATEGORY",
                f"{where}.subcategory_id",
                (
                    f'{where}.subcategory_id "{subcategory_id}" does not match '
                    f"any taxonomy subcategory id"
                ),
                subcategory_id=subcategory_id,
            )
        ]
    return []


def validate_category(
    entry: dict, where: str, index: TaxonomyIndex
) -> list[ValidationFinding]:
    """Optional legacy category field.

    When present it must name a known category (by id or name) and, if
    subcategory_id resolves, it must be that subcategory's parent. An
    unresolved subcategory skips the cross-check; validate_subcategory
    already reports it.
    """
    category = entry.get("category")
    if category is None:
        return []

    field = f"{where}.category"
    if not is_non_empty_string(category):
        return [
            _finding(
                "FIELD_TYPE_INVALID",
                field,
                f"{field} must be a non-empty string if present",
                value=category,
            )
        ]

    if category not in index.category_identifiers:
        return [
            _finding(
                "UNKNOWN_CATEGORY",
                field,
                f'{field} "{category}" does not match any taxonomy category id/name',
                category=category,
            )
        ]

    subcategory_id = entry.get("subcategory_id")
    if not is_non_empty_string(subcategory_id):
        return []

    parent = index.parent_of(subcategory_id)
    if parent is None or category in (parent.id, parent.name):
        return []

    return [
        _finding(
            "CATEGORY_MISMATCH",
            field,
            (
                f'{field} "{category}" conflicts with inferred parent '
                f'"{parent.id}" ("{parent.name}") for subcategory_id '
                f'"{subcategory_id}"'
            ),
            category=category,
            parent_id=parent.id,
            parent_name=parent.name,
            subcategory_id=subcategory_id,
        )
    ]
