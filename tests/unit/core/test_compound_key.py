"""Unit tests for compound key parsing."""

from __future__ import annotations

import pytest

from core.compound_key import compose_key, is_folder_key, parse_key
from core.errors import MalformedKeyError


def test_parse_key_splits_embedded_key() -> None:
    """Embedded keys should split into parent and child halves."""
    parsed = parse_key("!items.effects!abc123.def456")

    assert (parsed.parent_type, parsed.child_type, parsed.parent_id, parsed.child_id) == (
        "items",
        "effects",
        "abc123",
        "def456",
    )


def test_parse_key_marks_top_level_key() -> None:
    """Top-level keys should not carry parent or child fields."""
    parsed = parse_key("!actors!A1")

    assert not parsed.is_embedded and parsed.parent_type is None and parsed.id_segment == "A1"


@pytest.mark.parametrize("key", ["!actors!A1", "!tables!x9Y8z7", "!folders!F1"])
def test_compose_key_reproduces_parsed_top_level_key(key: str) -> None:
    """Composing parsed segments should give back the original key."""
    parsed = parse_key(key)

    assert compose_key(parsed.type_segment, parsed.id_segment) == key


def test_compose_key_builds_parent_key() -> None:
    """Composing type and id should produce a top-level key."""
    assert compose_key("items", "abc123") == "!items!abc123"


def test_parse_key_splits_on_first_dot_only() -> None:
    """Nested child segments should stay with the child half."""
    parsed = parse_key("!actors.items.effects!A1.I1.E1")

    assert parsed.child_type == "items.effects" and parsed.child_id == "I1.E1"


@pytest.mark.parametrize(
    "key",
    ["actors!A1", "!actors", "!!A1", "!actors!", "!items.effects!abc123", "!items.!a.b", 42],
)
def test_parse_key_rejects_malformed_keys(key: object) -> None:
    """Keys outside the grammar should raise MalformedKeyError."""
    with pytest.raises(MalformedKeyError):
        parse_key(key)


def test_parse_key_rejects_dotted_top_level_id() -> None:
    """Only embedded keys may carry a dot in the id segment."""
    with pytest.raises(MalformedKeyError):
        parse_key("!actors!a.b")


def test_compose_key_rejects_bang_in_type() -> None:
    """Type segments containing '!' cannot form a key."""
    with pytest.raises(MalformedKeyError):
        compose_key("act!ors", "A1")


def test_is_folder_key_matches_folder_prefix() -> None:
    """Folder keys are recognized by their type segment."""
    assert is_folder_key("!folders!F1") and not is_folder_key("!foldersx!F1")
