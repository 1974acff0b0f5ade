"""Public SDK surface for packconv.

This module provides a stable import path for scripted pack builds.
It re-exports the primary client, config, and conversion helpers.
"""

from __future__ import annotations

from core.compound_key import compose_key, parse_key
from core.config import PackConfig
from core.types import CompileResult, DumpResult, ExtractResult, PackStatus, RestoreResult
from convert.folder_paths import resolve_folder_path, sanitize_name
from convert.migrations import migrate_document, normalize_stats
from convert.organizer import attach, organize, reconstruct
from store.pack_sdk import PackClient

__all__ = [
    "CompileResult",
    "DumpResult",
    "ExtractResult",
    "PackClient",
    "PackConfig",
    "PackStatus",
    "RestoreResult",
    "attach",
    "compose_key",
    "migrate_document",
    "normalize_stats",
    "organize",
    "parse_key",
    "reconstruct",
    "resolve_folder_path",
    "sanitize_name",
]
