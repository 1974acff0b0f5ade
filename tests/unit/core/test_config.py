"""Unit tests for core config parsing."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.config import PackConfig
from core.constants import DEFAULT_AVAILABLE_PACKS, DEFAULT_SYSTEM_ID
from core.errors import PackConfigError


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "PACKCONV_PROJECT_ROOT",
        "PACKCONV_CONFIG_FILE",
        "PACKCONV_CORE_VERSION",
        "PACKCONV_SYSTEM_ID",
        "PACKCONV_MAX_FOLDER_DEPTH",
    ):
        monkeypatch.delenv(name, raising=False)


def test_from_env_reads_project_root(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Config should resolve project root from environment."""
    monkeypatch.setenv("PACKCONV_PROJECT_ROOT", str(tmp_path))

    config = PackConfig.from_env()

    assert config.project_root == tmp_path.resolve()


def test_from_env_uses_defaults_without_config_file(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    """Missing default config file should fall back to built-in values."""
    monkeypatch.setenv("PACKCONV_PROJECT_ROOT", str(tmp_path))

    config = PackConfig.from_env()

    assert config.available_packs == DEFAULT_AVAILABLE_PACKS
    assert config.system_id == DEFAULT_SYSTEM_ID


def test_from_env_reads_yaml_file_and_env_overrides(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    """Project YAML values apply, and environment values win over them."""
    (tmp_path / "packconv.yaml").write_text(
        "packs: [actors, items]\ncore_version: '13.0'\nsystem_id: from-file\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("PACKCONV_PROJECT_ROOT", str(tmp_path))
    monkeypatch.setenv("PACKCONV_SYSTEM_ID", "from-env")

    config = PackConfig.from_env()

    assert config.available_packs == ("actors", "items")
    assert config.core_version == "13.0"
    assert config.system_id == "from-env"


def test_from_env_rejects_unknown_file_keys(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    """Unsupported keys in the YAML file should raise a config error."""
    (tmp_path / "packconv.yaml").write_text("colour: blue\n", encoding="utf-8")
    monkeypatch.setenv("PACKCONV_PROJECT_ROOT", str(tmp_path))

    with pytest.raises(PackConfigError):
        PackConfig.from_env()


def test_from_env_requires_explicit_config_file(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    """An explicitly configured file must exist."""
    monkeypatch.setenv("PACKCONV_CONFIG_FILE", str(tmp_path / "missing.yaml"))

    with pytest.raises(PackConfigError):
        PackConfig.from_env()


def test_from_env_raises_for_invalid_depth(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Config should fail for a non-numeric folder depth."""
    monkeypatch.setenv("PACKCONV_PROJECT_ROOT", str(tmp_path))
    monkeypatch.setenv("PACKCONV_MAX_FOLDER_DEPTH", "deep")

    with pytest.raises(PackConfigError):
        PackConfig.from_env()
