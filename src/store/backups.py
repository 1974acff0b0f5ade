"""Timestamped backups of pack representations.

Before a pack directory is replaced, it can be renamed aside so the
previous contents survive a bad extract or restore.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from core.constants import BACKUP_SUFFIX, BACKUP_TIMESTAMP_FORMAT
from core.errors import PackStoreError
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


def backup_path(target: Path) -> Path | None:
    """Rename a file or directory to ``<name>.bak-<timestamp>``.

    Args:
        target: Path to move aside.

    Returns:
        Backup location, or ``None`` when there was nothing to back up.

    Raises:
        PackStoreError: If the rename fails.
    """
    if not target.exists():
        return None
    timestamp = datetime.now(timezone.utc).strftime(BACKUP_TIMESTAMP_FORMAT)
    destination = target.with_name(f"{target.name}{BACKUP_SUFFIX}-{timestamp}")
    try:
        target.rename(destination)
    except OSError as error:
        raise PackStoreError(
            f"Failed to back up {target} to {destination}: {error}. "
            "Check permissions or retry without --backup."
        ) from error
    _LOGGER.info("backup_created", source=str(target), backup=str(destination))
    return destination
