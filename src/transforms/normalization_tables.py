"""Override tables for instance display aliases and test instances.

Tables are built once per run, optionally from a YAML file, and passed
into the aggregators explicitly.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Mapping, cast

from core.constants import DEFAULT_INSTANCE_DISPLAY_OVERRIDES, DEFAULT_TEST_INSTANCE_NAMES
from core.errors import RollupConfigError, RollupDependencyError
from core.types import NormalizationTables
from transforms.key_normalizer import canonical_instance

_SUPPORTED_KEYS = ("instance_display_overrides", "test_instances")


def build_normalization_tables(
    instance_display_overrides: Mapping[str, str] | None = None,
    test_instance_names: Iterable[str] | None = None,
) -> NormalizationTables:
    """Build immutable tables, falling back to the built-in defaults."""
    overrides = (
        DEFAULT_INSTANCE_DISPLAY_OVERRIDES
        if instance_display_overrides is None
        else instance_display_overrides
    )
    names = DEFAULT_TEST_INSTANCE_NAMES if test_instance_names is None else test_instance_names
    return NormalizationTables(
        instance_display_overrides={str(k): str(v) for k, v in overrides.items()},
        test_instances=frozenset(canonical_instance(name) for name in names if name),
    )


def load_normalization_tables(tables_path: Path | None) -> NormalizationTables:
    """Load tables from a YAML file, or defaults when no file is configured.

    Args:
        tables_path: Optional YAML file path.

    Returns:
        Normalization tables.

    Raises:
        RollupDependencyError: If PyYAML is unavailable.
        RollupConfigError: If the file is missing or malformed.
    """
    if tables_path is None:
        return build_normalization_tables()
    payload = _load_yaml_payload(tables_path)
    if payload is None:
        return build_normalization_tables()
    if not isinstance(payload, Mapping):
        raise RollupConfigError(
            f"Invalid normalization tables at {tables_path}: expected a mapping with "
            f"keys {_SUPPORTED_KEYS}."
        )
    unknown_keys = sorted(set(payload) - set(_SUPPORTED_KEYS))
    if unknown_keys:
        raise RollupConfigError(
            f"Unsupported keys in normalization tables at {tables_path}: {unknown_keys}. "
            f"Supported keys: {_SUPPORTED_KEYS}."
        )
    return build_normalization_tables(
        _parse_overrides(payload.get("instance_display_overrides"), tables_path),
        _parse_test_instances(payload.get("test_instances"), tables_path),
    )


def _load_yaml_payload(tables_path: Path) -> object:
    try:
        import yaml  # type: ignore[import-untyped]
    except ImportError as error:  # pragma: no cover - dependency failure
        raise RollupDependencyError(
            "Normalization table files require PyYAML. Install with 'pip install pyyaml'."
        ) from error
    if not tables_path.exists():
        raise RollupConfigError(
            f"Normalization tables file does not exist at {tables_path}. "
            "Unset ROLLUP_TABLES_FILE or provide a valid YAML file."
        )
    try:
        return cast(object, yaml.safe_load(tables_path.read_text(encoding="utf-8")))
    except OSError as error:
        raise RollupConfigError(
            f"Failed to read normalization tables at {tables_path}: {error}."
        ) from error
    except yaml.YAMLError as error:
        raise RollupConfigError(
            f"Failed to parse normalization tables at {tables_path}: {error}. Fix YAML syntax."
        ) from error


def _parse_overrides(value: object, tables_path: Path) -> Mapping[str, str] | None:
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise RollupConfigError(
            f"Invalid instance_display_overrides in {tables_path}: expected a mapping."
        )
    return {str(alias): str(display) for alias, display in value.items()}


def _parse_test_instances(value: object, tables_path: Path) -> list[str] | None:
    if value is None:
        return None
    if isinstance(value, str) or not isinstance(value, list):
        raise RollupConfigError(f"Invalid test_instances in {tables_path}: expected a list.")
    return [str(name) for name in value]
