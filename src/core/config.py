"""Runtime configuration model for daily rollups.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import (
    DAILY_DIR_PARTS,
    DEFAULT_DATA_ROOT,
    FI_REGISTRY_FILE_NAME,
    RAW_DIR_NAME,
)
from core.errors import RollupConfigError


@dataclass(frozen=True)
class RollupConfig:
    """Validated runtime configuration.

    Attributes:
        data_root: Local root directory for raw input and daily output.
        raw_dir: Directory holding ``<source>/<date>.json`` raw payloads.
        daily_dir: Directory receiving ``<date>.json`` daily documents.
        registry_path: FI registry JSON file, optional on disk.
        tables_path: Optional YAML file overriding normalization tables.
    """

    data_root: Path
    raw_dir: Path
    daily_dir: Path
    registry_path: Path
    tables_path: Path | None = None

    @classmethod
    def from_env(cls) -> "RollupConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            RollupConfigError: If environment values are invalid.
        """
        data_root = _resolve_path(
            os.getenv("ROLLUP_DATA_ROOT", str(DEFAULT_DATA_ROOT)), "ROLLUP_DATA_ROOT"
        )
        return cls.for_data_root(
            data_root,
            raw_dir=_optional_env_path("ROLLUP_RAW_DIR"),
            daily_dir=_optional_env_path("ROLLUP_DAILY_DIR"),
            registry_path=_optional_env_path("ROLLUP_REGISTRY_PATH"),
            tables_path=_optional_env_path("ROLLUP_TABLES_FILE"),
        )

    @classmethod
    def for_data_root(
        cls,
        data_root: Path,
        *,
        raw_dir: Path | None = None,
        daily_dir: Path | None = None,
        registry_path: Path | None = None,
        tables_path: Path | None = None,
    ) -> "RollupConfig":
        """Build config with every unset path derived from one data root."""
        return cls(
            data_root=data_root,
            raw_dir=raw_dir or data_root / RAW_DIR_NAME,
            daily_dir=daily_dir or data_root.joinpath(*DAILY_DIR_PARTS),
            registry_path=registry_path or data_root / FI_REGISTRY_FILE_NAME,
            tables_path=tables_path,
        )


def _optional_env_path(variable: str) -> Path | None:
    raw_value = os.getenv(variable)
    if raw_value is None:
        return None
    return _resolve_path(raw_value, variable)


def _resolve_path(raw_value: str, variable: str) -> Path:
    """Resolve a path-valued environment variable.

    Args:
        raw_value: Raw string from environment.
        variable: Variable name used in error messages.

    Returns:
        Absolute path.

    Raises:
        RollupConfigError: If the value is blank.
    """
    if not raw_value.strip():
        raise RollupConfigError(
            f"Invalid {variable} value: expected a path, got an empty string. "
            f"Unset {variable} or point it at a directory."
        )
    return Path(raw_value.strip()).expanduser().resolve()
