"""Pack registry validation and filesystem layout.

This module centralizes where each pack representation lives under
the project root so every command resolves paths the same way.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from core.config import PackConfig
from core.constants import PACK_SOURCE_DIR_NAME, PACKS_DIR_NAME, STORE_FILE_SUFFIX
from core.errors import InvalidPackNameError
from core.types import PackPaths


def validate_pack_name(pack_name: str, available_packs: Sequence[str]) -> str:
    """Validate a pack name against the registered packs.

    Args:
        pack_name: Requested pack name.
        available_packs: Registered pack names.

    Returns:
        The validated pack name.

    Raises:
        InvalidPackNameError: If the pack is not registered.
    """
    if pack_name not in available_packs:
        raise InvalidPackNameError(
            f"Invalid pack name: {pack_name}. Available packs: {', '.join(available_packs)}."
        )
    return pack_name


def resolve_pack_paths(config: PackConfig, pack_name: str) -> PackPaths:
    """Resolve every on-disk location for a registered pack.

    Raises:
        InvalidPackNameError: If the pack is not registered.
    """
    validate_pack_name(pack_name, config.available_packs)
    packs_dir = config.project_root / PACKS_DIR_NAME
    return PackPaths(
        pack_name=pack_name,
        db_file=packs_dir / f"{pack_name}{STORE_FILE_SUFFIX}",
        source_dir=config.project_root / PACK_SOURCE_DIR_NAME / pack_name,
        level_dir=packs_dir / pack_name,
    )


def pack_name_from_file(file_path: Path) -> str:
    """Derive a pack name from a flat store file name (``items.db`` → ``items``)."""
    return file_path.stem
