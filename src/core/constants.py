"""Core constants used across packconv modules.

This module centralizes layout names and conversion defaults.
Keeping values here avoids magic literals in conversion logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_PROJECT_ROOT = Path(".")
DEFAULT_CONFIG_FILE_NAME = "packconv.yaml"
PACKS_DIR_NAME = "packs"
PACK_SOURCE_DIR_NAME = "packsrc"
STORE_FILE_SUFFIX = ".db"
DOCUMENT_FILE_SUFFIX = ".json"
FOLDERS_FILE_NAME = "_folders.json"
FOLDER_TYPE = "folders"
ORIGINAL_KEY_FIELD = "_originalKey"
EMBEDDED_FIELD = "embedded"
STATS_FIELD = "_stats"
DEFAULT_AVAILABLE_PACKS = ("actors", "items", "macros", "rollTables", "journals", "scenes")
DEFAULT_CHECKPACK_PACK = "rollTables"
DEFAULT_CORE_VERSION = "12.343"
DEFAULT_SYSTEM_ID = "fantastic-depths"
DEFAULT_MAX_FOLDER_DEPTH = 64
DEFAULT_SAMPLE_KEY_LIMIT = 20
UNNAMED_FILE_NAME = "unnamed"
BACKUP_SUFFIX = ".bak"
BACKUP_TIMESTAMP_FORMAT = "%Y%m%dT%H%M%S%fZ"
JSON_INDENT = 2
