"""Unit tests for normalization override tables."""

from __future__ import annotations

import pytest

from core.errors import RollupConfigError
from tests.fixture_paths import fixture_path
from transforms.normalization_tables import build_normalization_tables, load_normalization_tables


def test_default_tables_include_builtin_overrides() -> None:
    """Defaults should carry the built-in alias and test instance."""
    tables = load_normalization_tables(None)

    assert tables.instance_display_overrides["digitalonboarding"] == "digital-onboarding"
    assert tables.test_instances == frozenset({"customerdev"})


def test_tables_are_immutable() -> None:
    """Override tables should reject mutation."""
    tables = build_normalization_tables()

    with pytest.raises(TypeError):
        tables.instance_display_overrides["x"] = "y"  # type: ignore[index]


def test_load_normalization_tables_reads_yaml() -> None:
    """YAML tables should canonicalize test instance names."""
    tables = load_normalization_tables(fixture_path("tables.yaml"))

    assert tables.instance_display_overrides["instance-one"] == "instance1"
    assert tables.test_instances == frozenset({"customerdev", "qasandbox"})


def test_load_normalization_tables_rejects_unknown_keys(tmp_path) -> None:
    """Unsupported keys should fail fast."""
    tables_path = tmp_path / "tables.yaml"
    tables_path.write_text("aliases: {}\n", encoding="utf-8")

    with pytest.raises(RollupConfigError):
        load_normalization_tables(tables_path)


def test_load_normalization_tables_rejects_missing_file(tmp_path) -> None:
    """A configured but missing file is a configuration error."""
    with pytest.raises(RollupConfigError):
        load_normalization_tables(tmp_path / "missing.yaml")


def test_load_normalization_tables_rejects_scalar_test_instances(tmp_path) -> None:
    """test_instances must be a list."""
    tables_path = tmp_path / "tables.yaml"
    tables_path.write_text("test_instances: customer-dev\n", encoding="utf-8")

    with pytest.raises(RollupConfigError):
        load_normalization_tables(tables_path)
