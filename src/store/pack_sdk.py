"""Python SDK for pack operations.

This module exposes high-level APIs for extract, compile, dump,
restore, and inspection backed by one runtime configuration.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

from core.config import PackConfig
from core.constants import DEFAULT_SAMPLE_KEY_LIMIT
from core.pack_paths import resolve_pack_paths
from core.types import CompileResult, DumpResult, ExtractResult, PackStatus, RestoreResult
from convert.compiler import compile_pack
from convert.extractor import extract_pack
from store.level_store import StoreOpener, open_level_store
from store.pack_archive import dump_pack, list_packs, restore_pack, sample_keys


class PackClient:
    """Primary SDK entry point for pack workflows."""

    def __init__(
        self,
        config: PackConfig | None = None,
        store_opener: StoreOpener = open_level_store,
    ) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration.
            store_opener: Factory for LevelDB pack handles.
        """
        self._config = config or PackConfig.from_env()
        self._store_opener = store_opener

    @property
    def config(self) -> PackConfig:
        """Runtime configuration used by this client."""
        return self._config

    def extract(
        self,
        pack_name: str,
        db_file: Path | None = None,
        backup: bool = False,
    ) -> ExtractResult:
        """Extract a pack's flat store into its source tree.

        Raises:
            InvalidPackNameError: If the pack is not registered.
            SourceNotFoundError: If the store file is missing.
            PackStoreError: If the store is unreadable.
        """
        return extract_pack(self._config, pack_name, db_file=db_file, backup=backup)

    def compile(self, pack_name: str, output_path: Path | None = None) -> CompileResult:
        """Compile a pack's source tree into its flat store file.

        Raises:
            InvalidPackNameError: If the pack is not registered.
            SourceNotFoundError: If the source tree is missing.
            PackStoreError: If the store file cannot be written.
        """
        return compile_pack(self._config, pack_name, output_path=output_path)

    def dump(self, pack_name: str) -> DumpResult:
        """Dump a LevelDB pack into its flat store file."""
        paths = resolve_pack_paths(self._config, pack_name)
        return dump_pack(paths, self._store_opener)

    def restore(self, pack_name: str, backup: bool = False) -> RestoreResult:
        """Rebuild a LevelDB pack from its flat store file."""
        paths = resolve_pack_paths(self._config, pack_name)
        return restore_pack(paths, self._store_opener, backup=backup)

    def checkpack(self, pack_name: str, limit: int = DEFAULT_SAMPLE_KEY_LIMIT) -> list[str]:
        """Return a sample of keys from a LevelDB pack."""
        paths = resolve_pack_paths(self._config, pack_name)
        return sample_keys(paths, self._store_opener, limit)

    def list_packs(self) -> list[PackStatus]:
        """Report on-disk status for every registered pack."""
        return list_packs(self._config)

    def with_project_root(self, project_root: str) -> "PackClient":
        """Clone the client with a different project root.

        Args:
            project_root: New project root path.

        Returns:
            New SDK client instance.
        """
        resolved_root = Path(project_root).expanduser().resolve()
        updated_config = replace(self._config, project_root=resolved_root)
        return PackClient(updated_config, self._store_opener)
