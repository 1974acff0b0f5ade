"""Unit tests for JSON text helpers."""

from __future__ import annotations

from pathlib import Path

from core.json_text import (
    parse_json_text,
    read_json_file,
    render_json,
    write_json_file,
    write_json_file_atomic,
)


def test_parse_json_text_strips_byte_order_mark() -> None:
    """A leading BOM should not break parsing."""
    payload = parse_json_text('\ufeff{"!actors!A1": {"name": "Bob"}}')

    assert payload == {"!actors!A1": {"name": "Bob"}}


def test_render_json_uses_crlf_and_two_space_indent() -> None:
    """Rendered JSON should be indented with CRLF line endings only."""
    text = render_json({"name": "Bob", "tags": ["a"]})

    assert text == '{\r\n  "name": "Bob",\r\n  "tags": [\r\n    "a"\r\n  ]\r\n}'


def test_write_json_file_keeps_crlf_on_disk(tmp_path: Path) -> None:
    """Written files should contain CRLF bytes regardless of platform."""
    file_path = tmp_path / "nested" / "doc.json"

    write_json_file(file_path, {"name": "Bob"})

    assert file_path.read_bytes() == b'{\r\n  "name": "Bob"\r\n}'


def test_write_json_file_atomic_replaces_existing_file(tmp_path: Path) -> None:
    """Atomic writes should replace content and leave no temp files."""
    file_path = tmp_path / "actors.db"
    file_path.write_text("old", encoding="utf-8")

    write_json_file_atomic(file_path, {"!actors!A1": {"name": "Bob"}})

    assert read_json_file(file_path) == {"!actors!A1": {"name": "Bob"}}
    assert [path.name for path in tmp_path.iterdir()] == ["actors.db"]
