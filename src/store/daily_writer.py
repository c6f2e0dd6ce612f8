"""Daily document persistence.

Documents are written to ``<daily_dir>/<date>.json`` through a hidden
temporary sibling that is renamed over the target, so readers never
observe a partially-written file. Rebuilds overwrite, never patch.
"""

from __future__ import annotations

from contextlib import suppress
import json
import os
from pathlib import Path
from typing import Any, Mapping
from uuid import uuid4

from core.constants import DAILY_FILE_SUFFIX
from core.dates import validate_iso_date
from core.errors import RollupIngestError, RollupStoreError


def serialize_daily_document(document: Mapping[str, Any]) -> str:
    """Render a document as stable JSON text."""
    return json.dumps(document, indent=2, sort_keys=True) + "\n"


def daily_file_path(daily_dir: Path, day: str) -> Path:
    """Return the document path for one date."""
    return daily_dir / f"{day}{DAILY_FILE_SUFFIX}"


def write_daily_file(daily_dir: Path, day: str, document: Mapping[str, Any]) -> Path:
    """Atomically write one daily document.

    Args:
        daily_dir: Output directory, created when missing.
        day: ISO date naming the file.
        document: Daily document payload.

    Returns:
        Path of the written document.

    Raises:
        RollupStoreError: If the file system write fails.
    """
    target_path = daily_file_path(daily_dir, day)
    temp_path = daily_dir / f".{target_path.name}.tmp-{os.getpid()}-{uuid4().hex}"
    try:
        daily_dir.mkdir(parents=True, exist_ok=True)
        temp_path.write_text(serialize_daily_document(document), encoding="utf-8")
        os.replace(temp_path, target_path)
    except OSError as error:
        with suppress(OSError):
            temp_path.unlink(missing_ok=True)
        raise RollupStoreError(
            f"Failed to write daily document at {target_path}: {error}. "
            "Check the output directory permissions and free space."
        ) from error
    return target_path


def read_daily_file(daily_dir: Path, day: str) -> dict[str, Any] | None:
    """Read one daily document, None when it has not been built.

    Raises:
        RollupStoreError: If the document exists but is not valid JSON.
    """
    document_path = daily_file_path(daily_dir, day)
    if not document_path.exists():
        return None
    try:
        payload = json.loads(document_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as error:
        raise RollupStoreError(
            f"Failed to parse daily document at {document_path}: {error.msg}. "
            "Rebuild the day from raw data."
        ) from error
    if not isinstance(payload, dict):
        raise RollupStoreError(
            f"Failed to parse daily document at {document_path}: expected JSON object."
        )
    return payload


def list_daily_dates(daily_dir: Path) -> list[str]:
    """List the dates that have a built daily document, oldest first."""
    if not daily_dir.exists():
        return []
    dates: list[str] = []
    for file_path in daily_dir.glob(f"*{DAILY_FILE_SUFFIX}"):
        try:
            dates.append(validate_iso_date(file_path.stem))
        except RollupIngestError:
            continue
    return sorted(dates)
