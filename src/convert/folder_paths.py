"""Folder path resolution and filename sanitization.

Documents point at their folder by id, and folders point at their
parent the same way. This module walks those chains into directory
names that are safe on Windows and Linux.
"""

from __future__ import annotations

import re
from typing import Mapping

from core.compound_key import compose_key
from core.constants import DEFAULT_MAX_FOLDER_DEPTH, FOLDER_TYPE, UNNAMED_FILE_NAME
from core.errors import MalformedKeyError
from core.logging_config import get_logger
from core.types import Document

_LOGGER = get_logger(__name__)
_UNSAFE_CHARACTERS = re.compile(r"[<>:\"|?*\\/\s&()']+")
_REPEATED_UNDERSCORES = re.compile(r"_{2,}")


def sanitize_name(name: object) -> str:
    """Turn a document or folder name into a filesystem-safe segment.

    Args:
        name: Raw name value from a document.

    Returns:
        Sanitized name, or ``"unnamed"`` when nothing usable remains.
    """
    if not isinstance(name, str) or not name:
        return UNNAMED_FILE_NAME
    sanitized = _UNSAFE_CHARACTERS.sub("_", name)
    sanitized = _REPEATED_UNDERSCORES.sub("_", sanitized)
    sanitized = sanitized.strip("_").strip()
    # "." and ".." would resolve outside the pack directory
    if not sanitized.strip("."):
        return UNNAMED_FILE_NAME
    return sanitized


def resolve_folder_path(
    document: Mapping[str, object],
    folders: Mapping[str, Document],
    max_depth: int = DEFAULT_MAX_FOLDER_DEPTH,
) -> tuple[str, ...]:
    """Resolve a document's folder chain into sanitized names.

    Traversal stops early, keeping the partial path, when a folder is
    missing, when a folder id repeats, or when ``max_depth`` is reached.

    Args:
        document: Document with an optional ``folder`` id.
        folders: Folder documents keyed ``!folders!<id>``.
        max_depth: Maximum number of folders to follow.

    Returns:
        Folder names ordered root first; empty for root-level documents.
    """
    folder_id = document.get("folder")
    names: list[str] = []
    visited: set[str] = set()
    while folder_id:
        folder_id = str(folder_id)
        if folder_id in visited:
            _LOGGER.warning("folder_cycle_detected", folder_id=folder_id, path=_join(names))
            break
        if len(visited) >= max_depth:
            _LOGGER.warning("folder_depth_exceeded", folder_id=folder_id, max_depth=max_depth)
            break
        visited.add(folder_id)
        try:
            folder_key = compose_key(FOLDER_TYPE, folder_id)
        except MalformedKeyError:
            _LOGGER.warning("folder_reference_invalid", folder_id=folder_id)
            break
        folder = folders.get(folder_key)
        if folder is None:
            _LOGGER.warning("folder_reference_missing", folder_key=folder_key)
            break
        names.append(sanitize_name(folder.get("name")))
        folder_id = folder.get("folder")
    names.reverse()
    return tuple(names)


def _join(reversed_names: list[str]) -> str:
    return "/".join(reversed(reversed_names))
