"""JSON text persistence helpers.

This module isolates the on-disk JSON conventions shared by every
pack representation: BOM tolerant reads, two-space indentation, and
CRLF line endings so checkouts diff the same on every platform.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
import re
import tempfile
from typing import Any

from core.constants import JSON_INDENT

_BYTE_ORDER_MARK = "\ufeff"
_LINE_BREAK_PATTERN = re.compile(r"\r?\n")


def strip_bom(text: str) -> str:
    """Remove a leading UTF-8 byte-order mark if present."""
    if text.startswith(_BYTE_ORDER_MARK):
        return text[1:]
    return text


def to_crlf(text: str) -> str:
    """Normalize every line ending to CRLF."""
    return _LINE_BREAK_PATTERN.sub("\r\n", text)


def render_json(payload: Any) -> str:
    """Render a payload as pretty-printed, CRLF-terminated JSON text."""
    return to_crlf(json.dumps(payload, indent=JSON_INDENT, ensure_ascii=False))


def render_compact_json(payload: Any) -> str:
    """Render a payload as single-line JSON text."""
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))


def parse_json_text(text: str) -> Any:
    """Parse JSON text after stripping a byte-order mark.

    Raises:
        json.JSONDecodeError: If the text is not valid JSON.
    """
    return json.loads(strip_bom(text))


def read_json_file(file_path: Path) -> Any:
    """Read and parse one JSON file.

    Raises:
        OSError: If the file cannot be read.
        UnicodeDecodeError: If the file is not UTF-8.
        json.JSONDecodeError: If the content is not valid JSON.
    """
    return parse_json_text(file_path.read_text(encoding="utf-8"))


def write_json_file(file_path: Path, payload: Any) -> None:
    """Write pretty CRLF JSON to a file, creating parent directories.

    Raises:
        OSError: If the file cannot be written.
        TypeError: If the payload is not JSON serializable.
    """
    text = render_json(payload)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with file_path.open("w", encoding="utf-8", newline="") as handle:
        handle.write(text)


def write_json_file_atomic(file_path: Path, payload: Any) -> None:
    """Write pretty CRLF JSON through a temp file and an atomic rename.

    Raises:
        OSError: If the file cannot be written or renamed.
        TypeError: If the payload is not JSON serializable.
    """
    text = render_json(payload)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    descriptor, temp_name = tempfile.mkstemp(
        dir=file_path.parent, prefix=f".{file_path.name}.", suffix=".tmp"
    )
    temp_path = Path(temp_name)
    try:
        with os.fdopen(descriptor, "w", encoding="utf-8", newline="") as handle:
            handle.write(text)
        os.replace(temp_path, file_path)
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise
