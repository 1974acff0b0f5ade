"""Per-type document migrations.

Migrations normalize legacy document shapes and run on both extract
and compile, so each handler must be idempotent. A handler failure
never escapes: the document is used unmigrated instead.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable

from core.compound_key import parse_key
from core.constants import STATS_FIELD
from core.errors import MalformedKeyError
from core.logging_config import get_logger
from core.types import Document, StatsStamp

_LOGGER = get_logger(__name__)

MigrationHandler = Callable[[Document], Document]


class DocumentType(str, Enum):
    """Known store type segments."""

    ACTOR = "actors"
    ITEM = "items"
    MACRO = "macros"
    TABLE = "tables"
    JOURNAL = "journal"
    SCENE = "scenes"
    FOLDER = "folders"
    TABLE_RESULT = "tables.results"
    ACTOR_ITEM = "actors.items"
    ACTOR_EFFECT = "actors.effects"
    ITEM_EFFECT = "items.effects"
    JOURNAL_PAGE = "journal.pages"


def document_type_for_key(key: str) -> DocumentType | None:
    """Return the known document type addressed by a store key, if any."""
    try:
        type_segment = parse_key(key).type_segment.lower()
    except MalformedKeyError:
        return None
    try:
        return DocumentType(type_segment)
    except ValueError:
        return None


def migrate_document(document: Document, original_key: str) -> Document:
    """Apply the registered migration for a document's type.

    Args:
        document: Document body; left unmodified.
        original_key: Store key the document lives under.

    Returns:
        Migrated copy, or the document itself when no handler applies
        or the handler fails.
    """
    document_type = document_type_for_key(original_key)
    handler = _MIGRATIONS.get(document_type) if document_type else None
    if handler is None:
        return document
    try:
        return handler(dict(document))
    except Exception as error:
        _LOGGER.warning(
            "migration_failed",
            key=original_key,
            document_type=document_type.value if document_type else None,
            error=str(error),
        )
        return document


def normalize_stats(document: Document, stamp: StatsStamp) -> Document:
    """Return a copy whose ``_stats`` holds only the deterministic stamp."""
    stamped = dict(document)
    stamped[STATS_FIELD] = {
        "coreVersion": stamp.core_version,
        "systemId": stamp.system_id,
    }
    return stamped


def _migrate_table_result(document: Document) -> Document:
    """Backport newer table result rows to the ``name``/``text`` layout."""
    result_type = document.get("type")
    if result_type == "text":
        if _is_set(document.get("description")) and not _is_set(document.get("name")):
            document["name"] = document["description"]
            document["description"] = ""
            document["text"] = document["name"]
        elif _is_set(document.get("description")) and not _is_set(document.get("text")):
            document["text"] = document["description"]
    elif result_type == "document":
        if _is_set(document.get("name")) and not _is_set(document.get("text")):
            document["text"] = document["name"]
        if _is_set(document.get("text")) and not _is_set(document.get("name")):
            document["name"] = document["text"]
    return document


def _is_set(value: Any) -> bool:
    return bool(value)


_MIGRATIONS: dict[DocumentType, MigrationHandler] = {
    DocumentType.TABLE_RESULT: _migrate_table_result,
}
