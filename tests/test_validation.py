"""Tests for bookstack_mcp.validation module."""

import pytest

from bookstack_mcp.errors import ValidationError
from bookstack_mcp.validation import ValidationHandler


def test_list_params_get_defaults(validator):
    assert validator.validate_params({}, "booksList") == {"count": 20, "offset": 0, "sort": "name"}


def test_none_is_treated_as_empty(validator):
    assert validator.validate_params(None, "recycleBinList") == {"count": 20, "offset": 0}


def test_nested_filter_and_tags_are_dumped(validator):
    params = validator.validate_params(
        {"count": "5", "filter": {"name": "api"}, "sort": "updated_at"},
        "booksList",
    )
    assert params == {"count": 5, "offset": 0, "sort": "updated_at", "filter": {"name": "api"}}

    book = validator.validate_params({"name": "Guide", "tags": [{"name": "team", "value": "docs"}]}, "bookCreate")
    assert book == {"name": "Guide", "tags": [{"name": "team", "value": "docs"}]}


@pytest.mark.parametrize(
    "raw, schema",
    [
        ({"count": 0}, "booksList"),
        ({"count": 501}, "pagesList"),
        ({"sort": "priority"}, "booksList"),
        ({}, "bookCreate"),
        ({"name": ""}, "bookCreate"),
        ({"name": "Page", "markdown": "# hi"}, "pageCreate"),
        ({"name": "Page", "book_id": 1}, "pageCreate"),
        ({"uploaded_to": 1, "name": "notes.txt"}, "attachmentCreate"),
        ({"query": ""}, "search"),
        ({"query": "x", "count": 101}, "search"),
        ({"email": "not-an-email", "name": "A"}, "userCreate"),
        ({"permissions": [{"view": True}]}, "contentPermissionsUpdate"),
        ({"filter": {"date_from": "yesterday"}}, "auditLogList"),
    ],
)
def test_invalid_params_are_rejected(validator, raw, schema):
    with pytest.raises(ValidationError) as exc_info:
        validator.validate_params(raw, schema)
    assert schema in str(exc_info.value)


def test_page_create_accepts_chapter_parent(validator):
    params = validator.validate_params({"chapter_id": 3, "name": "Intro", "html": "<p>hi</p>"}, "pageCreate")
    assert params == {"chapter_id": 3, "name": "Intro", "html": "<p>hi</p>"}


def test_audit_log_dates_are_serialized(validator):
    params = validator.validate_params({"filter": {"date_from": "2024-01-31"}}, "auditLogList")
    assert params["filter"] == {"date_from": "2024-01-31"}


def test_unknown_keys_are_dropped_by_default(validator):
    assert validator.validate_params({"name": "Guide", "colour": "red"}, "bookCreate") == {"name": "Guide"}


def test_strict_mode_rejects_unknown_keys():
    strict = ValidationHandler(strict=True)
    with pytest.raises(ValidationError, match="colour"):
        strict.validate_params({"name": "Guide", "colour": "red"}, "bookCreate")


def test_disabled_validation_passes_arguments_through():
    lenient = ValidationHandler(enabled=False)
    assert lenient.validate_params({"count": 9999}, "booksList") == {"count": 9999}


def test_unknown_schema_name(validator):
    with pytest.raises(ValidationError, match="Unknown parameter schema"):
        validator.validate_params({}, "widgetsList")


def test_non_mapping_params_are_rejected(validator):
    with pytest.raises(ValidationError):
        validator.validate_params(["name"], "bookCreate")


@pytest.mark.parametrize("raw, expected", [(5, 5), ("12", 12), (" 7 ", 7), (3.0, 3)])
def test_validate_id_accepts_positive_integers(validator, raw, expected):
    assert validator.validate_id(raw) == expected


@pytest.mark.parametrize("raw", [None, 0, -1, "abc", "1.5", 2.5, True, [], ""])
def test_validate_id_rejects_everything_else(validator, raw):
    with pytest.raises(ValidationError, match="'id' must be a positive integer"):
        validator.validate_id(raw)


def test_validate_id_uses_field_name(validator):
    with pytest.raises(ValidationError, match="'deletion_id'"):
        validator.validate_id(None, "deletion_id")


def test_validate_choice(validator):
    assert validator.validate_choice("pdf", ["html", "pdf"], "format") == "pdf"
    with pytest.raises(ValidationError, match="'format' must be one of html, pdf"):
        validator.validate_choice("zip", ["html", "pdf"], "format")


def test_tag_value_is_required(validator):
    with pytest.raises(ValidationError, match="value"):
        validator.validate_params({"name": "Guide", "tags": [{"name": "team"}]}, "bookCreate")
