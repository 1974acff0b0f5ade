"""Key-value store access for LevelDB pack directories.

The host application keeps each pack as a LevelDB directory of
UTF-8 JSON values. This module wraps plyvel behind a small protocol
so archive operations can run against any ordered key-value store.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Iterator, Protocol

from core.errors import PackDependencyError, PackStoreError


class KeyValueStore(Protocol):
    """Ordered key-value store with text keys and values."""

    def iterator(self) -> Iterator[tuple[str, str]]:
        """Yield key/value pairs in key order; failures raise ``PackStoreError``."""
        ...

    def put(self, key: str, value: str) -> None:
        """Write one value; failures raise ``PackStoreError``."""
        ...

    def close(self) -> None:
        """Release the underlying handle."""
        ...


StoreOpener = Callable[[Path, bool], KeyValueStore]


class LevelStore:
    """plyvel-backed LevelDB store.

    Read, write and decode failures surface as ``PackStoreError``.
    """

    def __init__(self, db: Any, level_dir: Path, error_type: type[Exception]) -> None:
        self._db = db
        self._level_dir = level_dir
        self._error_type = error_type

    def iterator(self) -> Iterator[tuple[str, str]]:
        """Yield decoded key/value pairs in key order."""
        try:
            for key, value in self._db.iterator():
                yield key.decode("utf-8"), value.decode("utf-8")
        except UnicodeDecodeError as error:
            raise PackStoreError(
                f"Failed to decode LevelDB entry in {self._level_dir}: {error}. "
                "Keys and values must be UTF-8 text."
            ) from error
        except self._error_type as error:
            raise PackStoreError(
                f"Failed to read LevelDB pack at {self._level_dir}: {error}."
            ) from error

    def put(self, key: str, value: str) -> None:
        """Write one UTF-8 encoded value."""
        try:
            self._db.put(key.encode("utf-8"), value.encode("utf-8"))
        except self._error_type as error:
            raise PackStoreError(
                f"Failed to write key '{key}' to LevelDB pack at {self._level_dir}: {error}."
            ) from error

    def close(self) -> None:
        """Close the LevelDB handle."""
        self._db.close()


def open_level_store(level_dir: Path, create: bool) -> KeyValueStore:
    """Open a LevelDB pack directory.

    Args:
        level_dir: LevelDB directory.
        create: Create the database when it does not exist.

    Returns:
        Open key-value store; callers must close it.

    Raises:
        PackDependencyError: If plyvel is not installed.
        PackStoreError: If the database cannot be opened.
    """
    try:
        import plyvel
    except ImportError as error:
        raise PackDependencyError(
            "LevelDB pack access requires plyvel, but it is not installed. "
            "Install with 'pip install packconv[leveldb]'."
        ) from error
    if not create and not level_dir.is_dir():
        raise PackStoreError(
            f"LevelDB pack directory not found: {level_dir}. Run restore to create it."
        )
    try:
        db = plyvel.DB(str(level_dir), create_if_missing=create)
    except plyvel.Error as error:
        raise PackStoreError(
            f"Failed to open LevelDB pack at {level_dir}: {error}. "
            "Close the host application if it holds the database lock."
        ) from error
    return LevelStore(db, level_dir, plyvel.Error)
