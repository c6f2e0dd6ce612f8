"""Unit tests for daily document persistence."""

from __future__ import annotations

import os

import pytest

from core.errors import RollupStoreError
from store.daily_writer import (
    list_daily_dates,
    read_daily_file,
    serialize_daily_document,
    write_daily_file,
)


def test_write_daily_file_creates_dated_document(tmp_path) -> None:
    """Writer should create the directory and a file named by date."""
    daily_dir = tmp_path / "data" / "daily"

    written = write_daily_file(daily_dir, "2025-01-15", {"date": "2025-01-15", "fi": {}})

    assert written == daily_dir / "2025-01-15.json"
    assert read_daily_file(daily_dir, "2025-01-15") == {"date": "2025-01-15", "fi": {}}


def test_write_daily_file_overwrites_and_leaves_no_temp_files(tmp_path) -> None:
    """Rebuilds fully replace the document without stray temp files."""
    write_daily_file(tmp_path, "2025-01-15", {"date": "2025-01-15", "fi": {"old": {}}})
    write_daily_file(tmp_path, "2025-01-15", {"date": "2025-01-15", "fi": {}})

    assert read_daily_file(tmp_path, "2025-01-15") == {"date": "2025-01-15", "fi": {}}
    assert sorted(os.listdir(tmp_path)) == ["2025-01-15.json"]


def test_write_daily_file_raises_store_error_on_failure(tmp_path) -> None:
    """File system failures should surface as RollupStoreError."""
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")

    with pytest.raises(RollupStoreError):
        write_daily_file(blocker / "daily", "2025-01-15", {"date": "2025-01-15"})


def test_serialize_daily_document_is_stable() -> None:
    """Serialization should not depend on dict insertion order."""
    first = serialize_daily_document({"b": 1, "a": {"y": 2, "x": 1}})
    second = serialize_daily_document({"a": {"x": 1, "y": 2}, "b": 1})

    assert first == second and first.endswith("\n")


def test_read_daily_file_returns_none_when_missing(tmp_path) -> None:
    """Unbuilt days read as None."""
    assert read_daily_file(tmp_path, "2025-01-15") is None


def test_list_daily_dates_ignores_foreign_files(tmp_path) -> None:
    """Only ISO-dated JSON documents are listed, oldest first."""
    for name in ("2025-01-16.json", "2025-01-15.json", "notes.json", ".2025-01-17.json.tmp-1"):
        (tmp_path / name).write_text("{}", encoding="utf-8")

    assert list_daily_dates(tmp_path) == ["2025-01-15", "2025-01-16"]
