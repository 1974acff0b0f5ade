"""Unit tests for flat store file persistence."""

from __future__ import annotations

import pytest

from core.errors import PackStoreError, SourceNotFoundError
from store.store_file import load_store_file, save_store_file


def test_load_store_file_preserves_key_order(tmp_path) -> None:
    """Loaded stores should keep the file's key order."""
    store_path = tmp_path / "items.db"
    store_path.write_text('{"!items!B": {}, "!items!A": {}}', encoding="utf-8")

    store = load_store_file(store_path)

    assert list(store) == ["!items!B", "!items!A"]


def test_load_store_file_missing_raises(tmp_path) -> None:
    """A missing store file should raise a not-found error."""
    with pytest.raises(SourceNotFoundError):
        load_store_file(tmp_path / "items.db")


def test_load_store_file_reports_invalid_json(tmp_path) -> None:
    """Broken JSON should raise an actionable store error."""
    store_path = tmp_path / "items.db"
    store_path.write_text("{", encoding="utf-8")

    with pytest.raises(PackStoreError, match="Failed to parse store file"):
        load_store_file(store_path)


def test_load_store_file_rejects_arrays_by_default(tmp_path) -> None:
    """Array stores should only load when legacy input is allowed."""
    store_path = tmp_path / "items.db"
    store_path.write_text('[{"_id": "I1"}]', encoding="utf-8")

    with pytest.raises(PackStoreError, match="expected a JSON object"):
        load_store_file(store_path)


def test_load_store_file_keys_legacy_entries_by_id(tmp_path) -> None:
    """Legacy entries should prefer _id and fall back to id."""
    store_path = tmp_path / "items.db"
    store_path.write_text(
        '[{"_id": "I1"}, {"id": "I2"}, {"name": "no id"}, "skip"]', encoding="utf-8"
    )

    store = load_store_file(store_path, allow_legacy_array=True)

    assert store == {"I1": {"_id": "I1"}, "I2": {"id": "I2"}}


def test_save_store_file_creates_parent_directories(tmp_path) -> None:
    """Saving should create the packs directory when needed."""
    store_path = tmp_path / "packs" / "items.db"

    save_store_file(store_path, {"!items!I1": {"name": "Torch"}})

    assert load_store_file(store_path) == {"!items!I1": {"name": "Torch"}}


def test_save_store_file_wraps_serialization_errors(tmp_path) -> None:
    """Unserializable values should surface as store errors."""
    with pytest.raises(PackStoreError):
        save_store_file(tmp_path / "items.db", {"!items!I1": {"value": object()}})

    assert not (tmp_path / "items.db").exists()
