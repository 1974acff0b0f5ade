"""Integration tests for full pack round trips."""

from __future__ import annotations

import json
from pathlib import Path

from convert.migrations import migrate_document, normalize_stats
from core.compound_key import is_folder_key
from core.config import PackConfig
from core.types import StatsStamp
from store.pack_sdk import PackClient
from tests.fake_level_store import FakeLevelOpener
from tests.fixture_paths import fixture_path, install_store_fixture


def _normalized_fixture(pack_name: str) -> dict[str, object]:
    stamp = StatsStamp(core_version="12.343", system_id="fantastic-depths")
    store = json.loads(fixture_path(f"{pack_name}.db").read_text(encoding="utf-8"))
    return {
        key: document
        if is_folder_key(key)
        else normalize_stats(migrate_document(document, key), stamp)
        for key, document in store.items()
    }


def _tree_snapshot(source_dir: Path) -> dict[str, bytes]:
    return {
        path.relative_to(source_dir).as_posix(): path.read_bytes()
        for path in sorted(source_dir.rglob("*"))
        if path.is_file()
    }


def test_extract_then_compile_reproduces_normalized_store(tmp_path) -> None:
    """Extracting and compiling should yield the normalized source store."""
    store_path = install_store_fixture(tmp_path, "actors")
    client = PackClient(PackConfig(project_root=tmp_path), store_opener=FakeLevelOpener())

    client.extract("actors")
    result = client.compile("actors")

    compiled = json.loads(store_path.read_text(encoding="utf-8"))
    assert compiled == _normalized_fixture("actors")
    assert list(compiled)[:2] == ["!folders!fldMonsters01", "!folders!fldOgreLair02"]
    assert result.failed_files == ()


def test_extract_places_documents_under_folder_chain(tmp_path) -> None:
    """Documents should land under their sanitized folder chain."""
    install_store_fixture(tmp_path, "actors")
    client = PackClient(PackConfig(project_root=tmp_path), store_opener=FakeLevelOpener())

    client.extract("actors")

    source_dir = tmp_path / "packsrc" / "actors"
    assert sorted(_tree_snapshot(source_dir)) == [
        "Lone_Wolf.json",
        "Monsters/Ogre_s_Lair/Gruk_the_Ogre.json",
        "_folders.json",
    ]


def test_second_extract_of_compiled_store_is_byte_identical(tmp_path) -> None:
    """Re-extracting a compiled store should not change the tree."""
    install_store_fixture(tmp_path, "actors")
    client = PackClient(PackConfig(project_root=tmp_path), store_opener=FakeLevelOpener())
    client.extract("actors")
    first_tree = _tree_snapshot(tmp_path / "packsrc" / "actors")

    client.compile("actors")
    client.extract("actors")

    assert _tree_snapshot(tmp_path / "packsrc" / "actors") == first_tree


def test_restore_then_dump_preserves_entries(tmp_path) -> None:
    """A LevelDB restore followed by a dump should keep every entry."""
    store_path = install_store_fixture(tmp_path, "actors")
    original = json.loads(store_path.read_text(encoding="utf-8"))
    client = PackClient(PackConfig(project_root=tmp_path), store_opener=FakeLevelOpener())

    client.restore("actors")
    result = client.dump("actors")

    assert json.loads(store_path.read_text(encoding="utf-8")) == original
    assert result.entry_count == len(original)
