"""Shared typed models.

This module defines immutable data models used by the key codec,
organizer, extractor, compiler, and pack archive layers.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

Document = dict[str, Any]
Store = dict[str, Document]


@dataclass(frozen=True)
class ParsedKey:
    """Decomposed compound store key.

    Attributes:
        type_segment: Text between the first two ``!`` markers.
        id_segment: Text after the second ``!`` marker.
        is_embedded: Whether the key addresses a child document.
        parent_type: Owning document type for embedded keys.
        child_type: Child collection name for embedded keys.
        parent_id: Owning document id for embedded keys.
        child_id: Child document id for embedded keys.
    """

    type_segment: str
    id_segment: str
    is_embedded: bool
    parent_type: str | None = None
    child_type: str | None = None
    parent_id: str | None = None
    child_id: str | None = None


@dataclass(frozen=True)
class StatsStamp:
    """Metadata written into every document's ``_stats`` field."""

    core_version: str
    system_id: str


@dataclass(frozen=True)
class EmbeddedDocument:
    """Child document discovered while organizing a store.

    Attributes:
        key: Original embedded store key.
        document: Document body.
        child_type: Child collection name.
        child_id: Child document id.
    """

    key: str
    document: Document
    child_type: str
    child_id: str


@dataclass(frozen=True)
class OrganizedDocuments:
    """Store split into top-level documents and their children."""

    top_level: dict[str, Document]
    embedded_by_parent: dict[str, list[EmbeddedDocument]]


@dataclass(frozen=True)
class CollectedDocument:
    """One parsed document file from a pack source tree."""

    file_path: Path
    relative_path: str
    document: Document


@dataclass(frozen=True)
class CollectedTree:
    """Everything read back from a pack source tree."""

    folders: Store
    documents: tuple[CollectedDocument, ...]
    failed_files: tuple[str, ...] = ()


@dataclass(frozen=True)
class Reconstruction:
    """Flat store entries rebuilt from file-tree documents.

    Attributes:
        documents: Rebuilt key/document pairs in emission order.
        failed_sources: Relative paths of files that could not be rebuilt.
        skipped_entries: Count of embedded entries dropped for missing keys.
    """

    documents: Store
    failed_sources: tuple[str, ...] = ()
    skipped_entries: int = 0


@dataclass(frozen=True)
class PackPaths:
    """Filesystem locations for one pack.

    Attributes:
        pack_name: Registered pack name.
        db_file: Flat store file.
        source_dir: Extracted file tree root.
        level_dir: LevelDB pack directory.
    """

    pack_name: str
    db_file: Path
    source_dir: Path
    level_dir: Path


@dataclass(frozen=True)
class ExtractResult:
    """Summary of one store to file-tree extraction."""

    pack_name: str
    output_dir: Path
    folder_count: int
    document_count: int
    embedded_count: int = 0
    failed_count: int = 0
    orphan_count: int = 0
    backup_dir: Path | None = None


@dataclass(frozen=True)
class CompileResult:
    """Summary of one file-tree to store compilation."""

    pack_name: str
    output_path: Path
    document_count: int
    folder_count: int
    failed_files: tuple[str, ...] = ()
    skipped_entries: int = 0


@dataclass(frozen=True)
class DumpResult:
    """Summary of one level store to flat store dump."""

    pack_name: str
    output_path: Path
    entry_count: int
    unparsed_keys: tuple[str, ...] = ()


@dataclass(frozen=True)
class RestoreResult:
    """Summary of one flat store to level store restore."""

    pack_name: str
    level_dir: Path
    entry_count: int
    backup_dir: Path | None = None


@dataclass(frozen=True)
class PackStatus:
    """On-disk presence of each representation of a pack."""

    pack_name: str
    level_exists: bool
    db_exists: bool
    source_exists: bool

