"""Flat store file persistence.

A flat store file is one JSON object mapping compound keys to
documents. Older dumps were JSON arrays of documents carrying their
own ``_id``; those are accepted when explicitly allowed.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from core.errors import PackStoreError, SourceNotFoundError
from core.json_text import read_json_file, write_json_file_atomic
from core.types import Store


def load_store_file(store_path: Path, allow_legacy_array: bool = False) -> Store:
    """Read and validate a flat store file.

    Args:
        store_path: Path to the ``.db`` JSON file.
        allow_legacy_array: Accept the array-of-documents format.

    Returns:
        Store mapping in file order.

    Raises:
        SourceNotFoundError: If the file does not exist.
        PackStoreError: If the file cannot be read or parsed.
    """
    if not store_path.is_file():
        raise SourceNotFoundError(
            f"Store file not found: {store_path}. Run dump or compile to create it."
        )
    try:
        payload = read_json_file(store_path)
    except (OSError, UnicodeDecodeError) as error:
        raise PackStoreError(
            f"Failed to read store file at {store_path}: {error}. Check file permissions."
        ) from error
    except json.JSONDecodeError as error:
        raise PackStoreError(
            f"Failed to parse store file at {store_path}: {error.msg} "
            f"(line {error.lineno}). Fix the JSON syntax or re-run dump."
        ) from error
    if isinstance(payload, dict):
        return payload
    if allow_legacy_array and isinstance(payload, list):
        return _store_from_legacy_array(payload)
    raise PackStoreError(
        f"Invalid store file at {store_path}: expected a JSON object at top level, "
        f"got {type(payload).__name__}."
    )


def save_store_file(store_path: Path, store: Store) -> None:
    """Write a flat store file atomically.

    Raises:
        PackStoreError: If the file cannot be written.
    """
    try:
        write_json_file_atomic(store_path, store)
    except (OSError, TypeError, ValueError) as error:
        raise PackStoreError(
            f"Failed to write store file at {store_path}: {error}. "
            "Check write permissions and available disk space."
        ) from error


def _store_from_legacy_array(documents: list[Any]) -> Store:
    """Key legacy array entries by their ``_id`` (or ``id``)."""
    store: Store = {}
    for document in documents:
        if not isinstance(document, dict):
            continue
        key = document.get("_id")
        if key is None:
            key = document.get("id")
        if key:
            store[str(key)] = document
    return store
