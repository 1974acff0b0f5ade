"""Flat store to file-tree extraction.

This module writes one JSON file per top-level document under folders
named after the document's folder chain, with embedded documents
nested inline and folder documents collected in ``_folders.json``.
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Mapping

from core.compound_key import is_folder_key, parse_key
from core.config import PackConfig
from core.constants import DOCUMENT_FILE_SUFFIX, FOLDERS_FILE_NAME
from core.errors import PackStoreError
from core.json_text import write_json_file
from core.logging_config import get_logger
from core.pack_paths import resolve_pack_paths
from core.types import (
    Document,
    EmbeddedDocument,
    ExtractResult,
    OrganizedDocuments,
    StatsStamp,
    Store,
)
from convert.folder_paths import resolve_folder_path, sanitize_name
from convert.migrations import migrate_document, normalize_stats
from convert.organizer import attach, organize, orphan_parent_keys
from store.backups import backup_path
from store.store_file import load_store_file

_LOGGER = get_logger(__name__)


class PackExtractor:
    """Extract one pack's flat store into its source tree."""

    def __init__(self, config: PackConfig, pack_name: str) -> None:
        """Initialize extractor for a registered pack.

        Args:
            config: Runtime configuration.
            pack_name: Registered pack name.

        Raises:
            InvalidPackNameError: If the pack is not registered.
        """
        self._config = config
        self._paths = resolve_pack_paths(config, pack_name)
        self._stamp = StatsStamp(core_version=config.core_version, system_id=config.system_id)

    def extract(self, db_file: Path | None = None, backup: bool = False) -> ExtractResult:
        """Replace the pack source tree with the contents of a flat store.

        Args:
            db_file: Optional store file; defaults to ``packs/<pack>.db``.
            backup: Rename the existing tree aside instead of deleting it.

        Returns:
            Extraction summary.

        Raises:
            SourceNotFoundError: If the store file is missing.
            PackStoreError: If the store is unreadable or the tree cannot be replaced.
        """
        store_path = db_file or self._paths.db_file
        store = load_store_file(store_path)
        output_dir = self._paths.source_dir
        backup_dir = backup_path(output_dir) if backup else None
        _remove_tree(output_dir)
        _make_tree_root(output_dir)
        documents, invalid_count = _split_invalid_documents(store)
        folders = {key: document for key, document in documents.items() if is_folder_key(key)}
        _write_folders_file(output_dir, folders)
        organized = self._migrate(organize(documents))
        tree_documents = attach(organized.top_level, organized.embedded_by_parent)
        written_count, failed_count = self._write_documents(output_dir, tree_documents, folders)
        result = ExtractResult(
            pack_name=self._paths.pack_name,
            output_dir=output_dir,
            folder_count=len(folders),
            document_count=written_count,
            embedded_count=sum(len(items) for items in organized.embedded_by_parent.values()),
            failed_count=failed_count + invalid_count,
            orphan_count=sum(
                len(organized.embedded_by_parent[key])
                for key in orphan_parent_keys(organized.top_level, organized.embedded_by_parent)
            ),
            backup_dir=backup_dir,
        )
        _LOGGER.info(
            "pack_extracted",
            pack_name=result.pack_name,
            source=str(store_path),
            output_dir=str(output_dir),
            folder_count=result.folder_count,
            document_count=result.document_count,
            embedded_count=result.embedded_count,
            failed_count=result.failed_count,
        )
        return result

    def _migrate(self, organized: OrganizedDocuments) -> OrganizedDocuments:
        """Apply migrations and the stats stamp to every document."""
        top_level = {
            key: normalize_stats(migrate_document(document, key), self._stamp)
            for key, document in organized.top_level.items()
        }
        embedded_by_parent = {
            parent_key: [
                EmbeddedDocument(
                    key=item.key,
                    document=normalize_stats(
                        migrate_document(item.document, item.key), self._stamp
                    ),
                    child_type=item.child_type,
                    child_id=item.child_id,
                )
                for item in items
            ]
            for parent_key, items in organized.embedded_by_parent.items()
        }
        return OrganizedDocuments(top_level=top_level, embedded_by_parent=embedded_by_parent)

    def _write_documents(
        self,
        output_dir: Path,
        tree_documents: Mapping[str, Document],
        folders: Mapping[str, Document],
    ) -> tuple[int, int]:
        """Write each top-level document to its own file.

        Returns:
            Count of written files and count of failed documents.
        """
        used_paths: set[str] = set()
        written_count = 0
        failed_count = 0
        for key, document in tree_documents.items():
            try:
                folder_names = resolve_folder_path(
                    document, folders, self._config.max_folder_depth
                )
                file_path = _unique_document_path(
                    output_dir.joinpath(*folder_names), key, document, used_paths
                )
                write_json_file(file_path, document)
            except (OSError, TypeError, ValueError) as error:
                _LOGGER.error("document_extract_failed", key=key, error=str(error))
                failed_count += 1
                continue
            used_paths.add(_path_identity(file_path))
            written_count += 1
        return written_count, failed_count


def extract_pack(
    config: PackConfig,
    pack_name: str,
    db_file: Path | None = None,
    backup: bool = False,
) -> ExtractResult:
    """Extract a pack's flat store into its source tree.

    Args:
        config: Runtime configuration.
        pack_name: Registered pack name.
        db_file: Optional store file override.
        backup: Back up the existing tree before replacing it.

    Returns:
        Extraction summary.
    """
    return PackExtractor(config, pack_name).extract(db_file=db_file, backup=backup)


def _split_invalid_documents(store: Store) -> tuple[Store, int]:
    """Drop store values that are not JSON objects."""
    documents: Store = {}
    invalid_count = 0
    for key, document in store.items():
        if isinstance(document, dict):
            documents[key] = document
            continue
        _LOGGER.error("document_not_object", key=key, value_type=type(document).__name__)
        invalid_count += 1
    return documents, invalid_count


def _write_folders_file(output_dir: Path, folders: Mapping[str, Document]) -> None:
    """Write ``_folders.json`` when the pack has any folders.

    Raises:
        PackStoreError: If the file cannot be written.
    """
    if not folders:
        _LOGGER.info("folders_absent", output_dir=str(output_dir))
        return
    folders_path = output_dir / FOLDERS_FILE_NAME
    try:
        write_json_file(folders_path, dict(folders))
    except (OSError, TypeError, ValueError) as error:
        raise PackStoreError(
            f"Failed to write folder documents to {folders_path}: {error}."
        ) from error
    _LOGGER.info("folders_extracted", path=str(folders_path), folder_count=len(folders))


def _unique_document_path(
    folder_dir: Path,
    key: str,
    document: Document,
    used_paths: set[str],
) -> Path:
    """Pick a document file path no earlier document in this extraction holds.

    Paths compare case-folded, since ``Bob.json`` and ``bob.json`` are one
    file on case-insensitive filesystems. A taken name gets the document
    id appended, then a counter until the path is free.
    """
    stem = sanitize_name(document.get("name"))
    file_path = folder_dir / f"{stem}{DOCUMENT_FILE_SUFFIX}"
    if _path_identity(file_path) not in used_paths:
        return file_path
    unique_stem = f"{stem}_{sanitize_name(parse_key(key).id_segment)}"
    unique_path = folder_dir / f"{unique_stem}{DOCUMENT_FILE_SUFFIX}"
    counter = 2
    while _path_identity(unique_path) in used_paths:
        unique_path = folder_dir / f"{unique_stem}_{counter}{DOCUMENT_FILE_SUFFIX}"
        counter += 1
    _LOGGER.warning(
        "filename_collision", key=key, path=str(file_path), renamed_to=str(unique_path)
    )
    return unique_path


def _path_identity(file_path: Path) -> str:
    return str(file_path).casefold()


def _remove_tree(output_dir: Path) -> None:
    """Delete an existing source tree; a missing tree is not an error.

    Raises:
        PackStoreError: If the tree exists but cannot be removed.
    """
    if not output_dir.exists():
        _LOGGER.info("source_tree_absent", output_dir=str(output_dir))
        return
    try:
        shutil.rmtree(output_dir)
    except OSError as error:
        raise PackStoreError(
            f"Failed to delete pack source folder {output_dir}: {error}. "
            "Close programs using the folder and retry."
        ) from error


def _make_tree_root(output_dir: Path) -> None:
    """Create the empty source tree root.

    Raises:
        PackStoreError: If the directory cannot be created.
    """
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as error:
        raise PackStoreError(
            f"Failed to create output directory {output_dir}: {error}."
        ) from error
