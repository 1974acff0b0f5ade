"""Embedded document organization.

Embedded documents live under their own compound keys in the flat
store but inside their parent's ``embedded`` list in the file tree.
This module moves documents between those two shapes.
"""

from __future__ import annotations

from typing import Mapping, Sequence

from core.compound_key import compose_key, is_folder_key, parse_key
from core.constants import EMBEDDED_FIELD, ORIGINAL_KEY_FIELD
from core.errors import MalformedKeyError, MissingKeyError
from core.logging_config import get_logger
from core.types import (
    CollectedDocument,
    Document,
    EmbeddedDocument,
    OrganizedDocuments,
    Reconstruction,
    Store,
)

_LOGGER = get_logger(__name__)


def organize(store: Mapping[str, Document]) -> OrganizedDocuments:
    """Partition a flat store into top-level and embedded documents.

    Folder documents are skipped; entries with malformed keys are
    dropped with a warning. Store order is preserved in both outputs.

    Args:
        store: Flat key to document mapping.

    Returns:
        Top-level documents and embedded documents grouped by parent key.
    """
    top_level: dict[str, Document] = {}
    embedded_by_parent: dict[str, list[EmbeddedDocument]] = {}
    for key, document in store.items():
        if isinstance(key, str) and is_folder_key(key):
            continue
        try:
            parsed = parse_key(key)
        except MalformedKeyError as error:
            _LOGGER.warning("malformed_key_skipped", key=str(key), error=str(error))
            continue
        if not parsed.is_embedded:
            top_level[key] = document
            continue
        parent_key = compose_key(str(parsed.parent_type), str(parsed.parent_id))
        embedded_by_parent.setdefault(parent_key, []).append(
            EmbeddedDocument(
                key=key,
                document=document,
                child_type=str(parsed.child_type),
                child_id=str(parsed.child_id),
            )
        )
    return OrganizedDocuments(top_level=top_level, embedded_by_parent=embedded_by_parent)


def attach(
    top_level: Mapping[str, Document],
    embedded_by_parent: Mapping[str, Sequence[EmbeddedDocument]],
) -> dict[str, Document]:
    """Build file-tree documents with children nested under their parent.

    Every returned document carries its store key in ``_originalKey``.
    Children are rendered in discovery order.

    Args:
        top_level: Top-level documents keyed by store key.
        embedded_by_parent: Embedded documents grouped by parent key.

    Returns:
        File-tree documents keyed by store key.
    """
    attached: dict[str, Document] = {}
    for key, document in top_level.items():
        tree_document = _with_original_key(key, document)
        children = embedded_by_parent.get(key)
        if children:
            tree_document[EMBEDDED_FIELD] = [
                _with_original_key(child.key, child.document) for child in children
            ]
        attached[key] = tree_document
    orphans = orphan_parent_keys(top_level, embedded_by_parent)
    if orphans:
        _LOGGER.warning(
            "orphan_embedded_documents",
            parent_keys=orphans,
            count=sum(len(embedded_by_parent[key]) for key in orphans),
        )
    return attached


def orphan_parent_keys(
    top_level: Mapping[str, Document],
    embedded_by_parent: Mapping[str, Sequence[EmbeddedDocument]],
) -> list[str]:
    """Return parent keys that own embedded documents but are not in the store."""
    return [key for key in embedded_by_parent if key not in top_level]


def reconstruct(collected: Sequence[CollectedDocument]) -> Reconstruction:
    """Rebuild flat store entries from file-tree documents.

    A file whose document lacks ``_originalKey`` is skipped as a whole.
    An embedded entry lacking ``_originalKey`` is skipped on its own.

    Args:
        collected: Parsed document files in the order to emit them.

    Returns:
        Flat store entries plus the failures encountered.
    """
    documents: Store = {}
    failed_sources: list[str] = []
    skipped_entries = 0
    for item in collected:
        try:
            entries, skipped = _reconstruct_document(item)
        except MissingKeyError as error:
            _LOGGER.warning(
                "document_key_missing", relative_path=item.relative_path, error=str(error)
            )
            failed_sources.append(item.relative_path)
            continue
        documents.update(entries)
        skipped_entries += skipped
    return Reconstruction(
        documents=documents,
        failed_sources=tuple(failed_sources),
        skipped_entries=skipped_entries,
    )


def _reconstruct_document(item: CollectedDocument) -> tuple[list[tuple[str, Document]], int]:
    """Split one file-tree document into its flat store entries.

    Raises:
        MissingKeyError: If the top-level document has no original key.
    """
    key = _require_original_key(item.document, item.relative_path)
    top_level = {
        field: value
        for field, value in item.document.items()
        if field not in (EMBEDDED_FIELD, ORIGINAL_KEY_FIELD)
    }
    entries: list[tuple[str, Document]] = [(key, top_level)]
    children = item.document.get(EMBEDDED_FIELD)
    if children is None:
        return entries, 0
    if not isinstance(children, list):
        _LOGGER.warning(
            "embedded_field_ignored",
            relative_path=item.relative_path,
            value_type=type(children).__name__,
        )
        return entries, 0
    skipped = 0
    for index, child in enumerate(children):
        try:
            child_key = _require_original_key(child, f"{item.relative_path}#embedded[{index}]")
        except MissingKeyError as error:
            _LOGGER.warning(
                "embedded_key_missing", relative_path=item.relative_path, error=str(error)
            )
            skipped += 1
            continue
        child_document = {
            field: value for field, value in child.items() if field != ORIGINAL_KEY_FIELD
        }
        entries.append((child_key, child_document))
    return entries, skipped


def _require_original_key(document: object, location: str) -> str:
    """Return the stored original key of a file-tree document.

    Raises:
        MissingKeyError: If the key is absent or not a non-empty string.
    """
    key = document.get(ORIGINAL_KEY_FIELD) if isinstance(document, dict) else None
    if not isinstance(key, str) or not key:
        raise MissingKeyError(
            f"Document at {location} has no {ORIGINAL_KEY_FIELD}. "
            "Restore the key from version control or re-extract the pack."
        )
    return key


def _with_original_key(key: str, document: Document) -> Document:
    """Return a copy of a document with its store key as the first field."""
    tree_document: Document = {ORIGINAL_KEY_FIELD: key}
    tree_document.update(
        (field, value) for field, value in document.items() if field != ORIGINAL_KEY_FIELD
    )
    return tree_document
