"""Runtime configuration model for packconv.

This module owns all environment variable and project file parsing.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Mapping, cast

from core.constants import (
    DEFAULT_AVAILABLE_PACKS,
    DEFAULT_CONFIG_FILE_NAME,
    DEFAULT_CORE_VERSION,
    DEFAULT_MAX_FOLDER_DEPTH,
    DEFAULT_PROJECT_ROOT,
    DEFAULT_SYSTEM_ID,
)
from core.errors import PackConfigError

_SUPPORTED_FILE_KEYS = ("packs", "core_version", "system_id", "max_folder_depth")


@dataclass(frozen=True)
class PackConfig:
    """Validated runtime configuration.

    Attributes:
        project_root: Directory holding ``packs/`` and ``packsrc/``.
        available_packs: Registered pack names, in processing order.
        core_version: Core version written into every ``_stats`` stamp.
        system_id: System id written into every ``_stats`` stamp.
        max_folder_depth: Upper bound on folder-chain traversal.
    """

    project_root: Path
    available_packs: tuple[str, ...] = DEFAULT_AVAILABLE_PACKS
    core_version: str = DEFAULT_CORE_VERSION
    system_id: str = DEFAULT_SYSTEM_ID
    max_folder_depth: int = DEFAULT_MAX_FOLDER_DEPTH

    @classmethod
    def from_env(cls) -> "PackConfig":
        """Build config from environment variables and the optional YAML file.

        Environment values take precedence over values from the file.

        Returns:
            A validated config object.

        Raises:
            PackConfigError: If environment or file values are invalid.
        """
        root_value = os.getenv("PACKCONV_PROJECT_ROOT", str(DEFAULT_PROJECT_ROOT))
        project_root = Path(root_value).expanduser().resolve()
        file_value = os.getenv("PACKCONV_CONFIG_FILE")
        config_file = (
            Path(file_value).expanduser().resolve()
            if file_value
            else project_root / DEFAULT_CONFIG_FILE_NAME
        )
        file_values = _load_config_file(config_file, required=bool(file_value))
        depth_value = os.getenv("PACKCONV_MAX_FOLDER_DEPTH")
        return cls(
            project_root=project_root,
            available_packs=_parse_packs(file_values.get("packs", DEFAULT_AVAILABLE_PACKS)),
            core_version=os.getenv(
                "PACKCONV_CORE_VERSION",
                str(file_values.get("core_version", DEFAULT_CORE_VERSION)),
            ),
            system_id=os.getenv(
                "PACKCONV_SYSTEM_ID",
                str(file_values.get("system_id", DEFAULT_SYSTEM_ID)),
            ),
            max_folder_depth=_parse_max_depth(
                depth_value
                if depth_value is not None
                else file_values.get("max_folder_depth", DEFAULT_MAX_FOLDER_DEPTH)
            ),
        )


def _load_config_file(config_file: Path, required: bool) -> Mapping[str, object]:
    """Load the optional YAML project config file.

    Args:
        config_file: Path to the YAML file.
        required: Whether a missing file is an error.

    Returns:
        Mapping of recognized config keys.

    Raises:
        PackConfigError: If the file is required but missing, or invalid.
    """
    if not config_file.exists():
        if required:
            raise PackConfigError(
                f"Config file not found at {config_file}. "
                "Unset PACKCONV_CONFIG_FILE or point it at an existing YAML file."
            )
        return {}
    import yaml

    try:
        payload = cast(object, yaml.safe_load(config_file.read_text(encoding="utf-8")))
    except OSError as error:
        raise PackConfigError(
            f"Failed to read config file at {config_file}: {error}. "
            "Check file permissions and retry."
        ) from error
    except yaml.YAMLError as error:
        raise PackConfigError(
            f"Failed to parse config file at {config_file}: {error}. Fix YAML syntax and retry."
        ) from error
    if payload is None:
        return {}
    if not isinstance(payload, Mapping):
        raise PackConfigError(
            f"Invalid config file at {config_file}: expected a mapping at top level."
        )
    unknown_keys = sorted(str(key) for key in payload if key not in _SUPPORTED_FILE_KEYS)
    if unknown_keys:
        raise PackConfigError(
            f"Invalid config file at {config_file}: unsupported keys {unknown_keys}. "
            f"Supported keys: {', '.join(_SUPPORTED_FILE_KEYS)}."
        )
    return cast(Mapping[str, object], payload)


def _parse_packs(raw_value: object) -> tuple[str, ...]:
    """Parse the registered pack list.

    Raises:
        PackConfigError: If the value is not a non-empty list of names.
    """
    if isinstance(raw_value, (list, tuple)) and raw_value:
        names = tuple(str(name).strip() for name in raw_value)
        if all(names):
            return names
    raise PackConfigError(
        f"Invalid packs value: expected a non-empty list of pack names, got {raw_value!r}."
    )


def _parse_max_depth(raw_value: object) -> int:
    """Parse the folder depth limit.

    Args:
        raw_value: Raw value from environment or file.

    Returns:
        Parsed positive integer.

    Raises:
        PackConfigError: If value is not a positive integer.
    """
    try:
        depth = int(str(raw_value))
    except ValueError as error:
        raise PackConfigError(
            "Invalid PACKCONV_MAX_FOLDER_DEPTH value: "
            f"expected integer, got '{raw_value}'. "
            "Set PACKCONV_MAX_FOLDER_DEPTH to a positive number."
        ) from error
    if depth < 1:
        raise PackConfigError(
            f"Invalid PACKCONV_MAX_FOLDER_DEPTH value {depth}: expected value >= 1."
        )
    return depth
