"""Unit tests for the LevelDB store wrapper."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

import pytest

from core.errors import PackStoreError
from store.level_store import LevelStore


class _DatabaseError(Exception):
    """Stands in for the binding's native error type."""


class _RawDatabase:
    def __init__(self, entries: list[tuple[bytes, bytes]], fail_writes: bool = False) -> None:
        self.entries = entries
        self.fail_writes = fail_writes
        self.closed = False

    def iterator(self) -> Iterator[tuple[bytes, bytes]]:
        yield from self.entries

    def put(self, key: bytes, value: bytes) -> None:
        if self.fail_writes:
            raise _DatabaseError("IO error: disk full")
        self.entries.append((key, value))

    def close(self) -> None:
        self.closed = True


def test_level_store_decodes_utf8_entries(tmp_path: Path) -> None:
    """Entries should be yielded as text."""
    database = _RawDatabase([("!items!I1".encode(), '{"name":"Épée"}'.encode())])
    store = LevelStore(database, tmp_path, _DatabaseError)

    entries = list(store.iterator())

    assert entries == [("!items!I1", '{"name":"Épée"}')]


def test_level_store_wraps_undecodable_values(tmp_path: Path) -> None:
    """Non-UTF-8 bytes should raise a store error."""
    database = _RawDatabase([(b"!items!I1", b"\xff\xfe")])
    store = LevelStore(database, tmp_path, _DatabaseError)

    with pytest.raises(PackStoreError, match="Failed to decode"):
        list(store.iterator())


def test_level_store_wraps_native_write_errors(tmp_path: Path) -> None:
    """Binding write errors should raise a store error."""
    store = LevelStore(_RawDatabase([], fail_writes=True), tmp_path, _DatabaseError)

    with pytest.raises(PackStoreError, match="disk full"):
        store.put("!items!I1", "{}")
