"""Raw day payload readers.

The fetch collaborator persists one JSON file per source and day under
``<raw_dir>/<source>/<date>.json``. This module only reads them.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from core.constants import (
    GA_SOURCE,
    PLACEMENTS_SOURCE,
    RAW_METADATA_FIELD,
    RAW_SOURCE_TYPES,
    SESSIONS_SOURCE,
)
from core.logging_config import get_logger
from core.types import RawDayPayloads

_LOGGER = get_logger(__name__)


def raw_path(raw_dir: Path, source: str, day: str) -> Path:
    """Return the raw payload path for one source and date."""
    if source not in RAW_SOURCE_TYPES:
        raise ValueError(f"Unsupported raw source '{source}'. Expected one of {RAW_SOURCE_TYPES}.")
    return raw_dir / source / f"{day}.json"


def read_raw_payload(raw_dir: Path, source: str, day: str) -> dict[str, Any] | None:
    """Read one raw payload, stripping the fetch metadata block.

    Args:
        raw_dir: Raw storage root.
        source: Source type (``ga``, ``sessions``, ``placements``).
        day: ISO date.

    Returns:
        Parsed payload, or None when the file is absent or unreadable.
    """
    payload_path = raw_path(raw_dir, source, day)
    if not payload_path.exists():
        return None
    try:
        payload = json.loads(payload_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as error:
        _LOGGER.warning(
            "raw_payload_corrupt", source=source, day=day, path=str(payload_path), error=str(error)
        )
        return None
    if not isinstance(payload, dict):
        _LOGGER.warning(
            "raw_payload_corrupt",
            source=source,
            day=day,
            path=str(payload_path),
            error="expected JSON object at top level",
        )
        return None
    payload.pop(RAW_METADATA_FIELD, None)
    return payload


def read_raw_day(raw_dir: Path, day: str) -> RawDayPayloads:
    """Read all three raw payloads for one date."""
    return RawDayPayloads(
        day=day,
        ga=read_raw_payload(raw_dir, GA_SOURCE, day),
        sessions=read_raw_payload(raw_dir, SESSIONS_SOURCE, day),
        placements=read_raw_payload(raw_dir, PLACEMENTS_SOURCE, day),
    )
