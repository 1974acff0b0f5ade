"""File-tree to flat store compilation.

This module reads a pack source tree back into one flat store file,
splitting embedded documents out under their original keys.
"""

from __future__ import annotations

import json
from pathlib import Path

from core.config import PackConfig
from core.constants import DOCUMENT_FILE_SUFFIX, FOLDERS_FILE_NAME
from core.errors import SourceNotFoundError
from core.json_text import read_json_file
from core.logging_config import get_logger
from core.pack_paths import resolve_pack_paths
from core.types import CollectedDocument, CollectedTree, CompileResult, StatsStamp, Store
from convert.migrations import migrate_document, normalize_stats
from convert.organizer import reconstruct
from store.store_file import save_store_file

_LOGGER = get_logger(__name__)


class PackCompiler:
    """Compile one pack's source tree into its flat store file."""

    def __init__(self, config: PackConfig, pack_name: str) -> None:
        """Initialize compiler for a registered pack.

        Args:
            config: Runtime configuration.
            pack_name: Registered pack name.

        Raises:
            InvalidPackNameError: If the pack is not registered.
        """
        self._paths = resolve_pack_paths(config, pack_name)
        self._stamp = StatsStamp(core_version=config.core_version, system_id=config.system_id)

    def compile(self, output_path: Path | None = None) -> CompileResult:
        """Rebuild the flat store from the pack source tree.

        Args:
            output_path: Optional store file; defaults to ``packs/<pack>.db``.

        Returns:
            Compilation summary.

        Raises:
            SourceNotFoundError: If the pack source tree does not exist.
            PackStoreError: If the store file cannot be written.
        """
        source_dir = self._paths.source_dir
        if not source_dir.is_dir():
            raise SourceNotFoundError(
                f"Pack source directory not found: {source_dir}. "
                "Run extract for this pack first."
            )
        tree = collect_source_tree(source_dir)
        reconstruction = reconstruct(tree.documents)
        store: Store = dict(tree.folders)
        for key, document in reconstruction.documents.items():
            store[key] = normalize_stats(migrate_document(document, key), self._stamp)
        destination = output_path or self._paths.db_file
        save_store_file(destination, store)
        result = CompileResult(
            pack_name=self._paths.pack_name,
            output_path=destination,
            document_count=len(reconstruction.documents),
            folder_count=len(tree.folders),
            failed_files=tree.failed_files + reconstruction.failed_sources,
            skipped_entries=reconstruction.skipped_entries,
        )
        _LOGGER.info(
            "pack_compiled",
            pack_name=result.pack_name,
            source_dir=str(source_dir),
            output_path=str(destination),
            document_count=result.document_count,
            folder_count=result.folder_count,
            failed_count=len(result.failed_files),
            skipped_entries=result.skipped_entries,
        )
        return result


def compile_pack(
    config: PackConfig,
    pack_name: str,
    output_path: Path | None = None,
) -> CompileResult:
    """Compile a pack's source tree into its flat store file.

    Args:
        config: Runtime configuration.
        pack_name: Registered pack name.
        output_path: Optional store file override.

    Returns:
        Compilation summary.
    """
    return PackCompiler(config, pack_name).compile(output_path=output_path)


def collect_source_tree(source_dir: Path) -> CollectedTree:
    """Read folder documents and every document file under a source tree.

    Files are returned sorted by POSIX relative path so output does not
    depend on directory listing order.

    Args:
        source_dir: Pack source tree root.

    Returns:
        Folder documents, parsed document files, and failed file paths.
    """
    folders = _load_folders(source_dir / FOLDERS_FILE_NAME)
    documents: list[CollectedDocument] = []
    failed_files: list[str] = []
    for file_path in _document_files(source_dir):
        relative_path = file_path.relative_to(source_dir).as_posix()
        try:
            payload = read_json_file(file_path)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as error:
            _LOGGER.warning("document_file_failed", relative_path=relative_path, error=str(error))
            failed_files.append(relative_path)
            continue
        if not isinstance(payload, dict):
            _LOGGER.warning(
                "document_file_failed",
                relative_path=relative_path,
                error=f"expected JSON object, got {type(payload).__name__}",
            )
            failed_files.append(relative_path)
            continue
        documents.append(
            CollectedDocument(file_path=file_path, relative_path=relative_path, document=payload)
        )
    _LOGGER.info(
        "source_tree_collected",
        source_dir=str(source_dir),
        folder_count=len(folders),
        document_count=len(documents),
        failed_count=len(failed_files),
    )
    return CollectedTree(
        folders=folders, documents=tuple(documents), failed_files=tuple(failed_files)
    )


def _document_files(source_dir: Path) -> list[Path]:
    """List document files recursively, sorted by relative path."""
    return sorted(
        (
            file_path
            for file_path in source_dir.rglob(f"*{DOCUMENT_FILE_SUFFIX}")
            if file_path.is_file() and file_path.name != FOLDERS_FILE_NAME
        ),
        key=lambda file_path: file_path.relative_to(source_dir).as_posix(),
    )


def _load_folders(folders_path: Path) -> Store:
    """Load ``_folders.json``; absence or damage is tolerated as empty."""
    if not folders_path.is_file():
        _LOGGER.info("folders_file_absent", path=str(folders_path))
        return {}
    try:
        payload = read_json_file(folders_path)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as error:
        _LOGGER.warning("folders_file_failed", path=str(folders_path), error=str(error))
        return {}
    if not isinstance(payload, dict):
        _LOGGER.warning(
            "folders_file_failed",
            path=str(folders_path),
            error=f"expected JSON object, got {type(payload).__name__}",
        )
        return {}
    return payload
