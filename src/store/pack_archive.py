"""Dump and restore between LevelDB packs and flat store files.

This module snapshots a LevelDB pack into a flat store file and
rebuilds a LevelDB pack from one, plus read-only inspection helpers.
"""

from __future__ import annotations

import json
import shutil
from itertools import islice

from core.config import PackConfig
from core.constants import DEFAULT_SAMPLE_KEY_LIMIT
from core.errors import PackStoreError
from core.json_text import parse_json_text, render_compact_json
from core.logging_config import get_logger
from core.pack_paths import resolve_pack_paths
from core.types import DumpResult, PackPaths, PackStatus, RestoreResult, Store
from store.backups import backup_path
from store.level_store import StoreOpener, open_level_store
from store.store_file import load_store_file, save_store_file

_LOGGER = get_logger(__name__)


def dump_pack(paths: PackPaths, opener: StoreOpener = open_level_store) -> DumpResult:
    """Write every entry of a LevelDB pack into its flat store file.

    Values that are not valid JSON are kept as raw strings. The file is
    replaced atomically, so a failed dump leaves the previous file intact.

    Args:
        paths: Pack locations.
        opener: Key-value store factory.

    Returns:
        Dump summary.

    Raises:
        PackStoreError: If the pack cannot be read or the file written.
    """
    store: Store = {}
    unparsed_keys: list[str] = []
    level_store = opener(paths.level_dir, False)
    try:
        for key, value in level_store.iterator():
            try:
                store[key] = parse_json_text(value)
            except json.JSONDecodeError as error:
                _LOGGER.error("value_parse_failed", key=key, error=error.msg)
                store[key] = value
                unparsed_keys.append(key)
    finally:
        level_store.close()
    save_store_file(paths.db_file, store)
    _LOGGER.info(
        "pack_dumped",
        pack_name=paths.pack_name,
        output_path=str(paths.db_file),
        entry_count=len(store),
    )
    return DumpResult(
        pack_name=paths.pack_name,
        output_path=paths.db_file,
        entry_count=len(store),
        unparsed_keys=tuple(unparsed_keys),
    )


def restore_pack(
    paths: PackPaths,
    opener: StoreOpener = open_level_store,
    backup: bool = False,
) -> RestoreResult:
    """Replace a LevelDB pack with the entries of its flat store file.

    Args:
        paths: Pack locations.
        opener: Key-value store factory.
        backup: Rename the existing LevelDB directory aside first.

    Returns:
        Restore summary.

    Raises:
        SourceNotFoundError: If the flat store file is missing.
        PackStoreError: If the file is invalid or the pack cannot be written.
    """
    entries = load_store_file(paths.db_file, allow_legacy_array=True)
    backup_dir = backup_path(paths.level_dir) if backup else None
    if paths.level_dir.exists():
        try:
            shutil.rmtree(paths.level_dir)
        except OSError as error:
            raise PackStoreError(
                f"Failed to delete LevelDB pack at {paths.level_dir}: {error}. "
                "Close the host application and retry."
            ) from error
    try:
        paths.level_dir.parent.mkdir(parents=True, exist_ok=True)
    except OSError as error:
        raise PackStoreError(
            f"Failed to create packs directory {paths.level_dir.parent}: {error}. "
            "Check write permissions and retry."
        ) from error
    level_store = opener(paths.level_dir, True)
    written = 0
    try:
        for key, value in entries.items():
            level_store.put(key, value if isinstance(value, str) else render_compact_json(value))
            written += 1
    finally:
        level_store.close()
    _LOGGER.info(
        "pack_restored",
        pack_name=paths.pack_name,
        level_dir=str(paths.level_dir),
        entry_count=written,
    )
    return RestoreResult(
        pack_name=paths.pack_name,
        level_dir=paths.level_dir,
        entry_count=written,
        backup_dir=backup_dir,
    )


def sample_keys(
    paths: PackPaths,
    opener: StoreOpener = open_level_store,
    limit: int = DEFAULT_SAMPLE_KEY_LIMIT,
) -> list[str]:
    """Return the first keys of a LevelDB pack, in key order."""
    level_store = opener(paths.level_dir, False)
    try:
        return [key for key, _ in islice(level_store.iterator(), limit)]
    finally:
        level_store.close()


def list_packs(config: PackConfig) -> list[PackStatus]:
    """Report which representations exist for every registered pack."""
    statuses: list[PackStatus] = []
    for pack_name in config.available_packs:
        paths = resolve_pack_paths(config, pack_name)
        statuses.append(
            PackStatus(
                pack_name=pack_name,
                level_exists=paths.level_dir.is_dir(),
                db_exists=paths.db_file.is_file(),
                source_exists=paths.source_dir.is_dir(),
            )
        )
    return statuses

