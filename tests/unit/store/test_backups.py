"""Unit tests for timestamped backups."""

from __future__ import annotations

from store.backups import backup_path


def test_backup_path_renames_directory(tmp_path) -> None:
    """Existing directories should move to a timestamped sibling."""
    target = tmp_path / "items"
    target.mkdir()
    (target / "Torch.json").write_text("{}", encoding="utf-8")

    destination = backup_path(target)

    assert destination is not None
    assert destination.parent == tmp_path
    assert destination.name.startswith("items.bak-")
    assert (destination / "Torch.json").is_file()
    assert not target.exists()


def test_backup_path_ignores_missing_target(tmp_path) -> None:
    """Nothing should happen when the target does not exist."""
    assert backup_path(tmp_path / "missing") is None
