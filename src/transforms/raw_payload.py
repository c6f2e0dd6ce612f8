"""Record extraction from raw day payloads.

A payload that is absent or flagged with ``error`` means the source was
unavailable for the day; it contributes no records and never raises.
"""

from __future__ import annotations

from typing import Any, Mapping

from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


def payload_records(
    payload: Mapping[str, Any] | None,
    records_field: str,
    *,
    source: str,
) -> list[Mapping[str, Any]]:
    """Return the usable records of one raw payload.

    Args:
        payload: Raw day payload, None when the file is absent.
        records_field: Name of the record array (``rows``, ``sessions``, ...).
        source: Source name for diagnostics.

    Returns:
        Mapping records only; non-object entries are dropped.
    """
    if isinstance(payload, Mapping) and payload.get("error"):
        _LOGGER.warning(
            "raw_flagged_error",
            source=source,
            day=str(payload.get("date") or "unknown"),
            error=str(payload["error"]),
        )
    return usable_records(payload, records_field)


def usable_records(
    payload: Mapping[str, Any] | None,
    records_field: str,
) -> list[Mapping[str, Any]]:
    """Return the records aggregation would consume, without logging."""
    if not isinstance(payload, Mapping) or payload.get("error"):
        return []
    records = payload.get(records_field)
    if not isinstance(records, list):
        return []
    return [record for record in records if isinstance(record, Mapping)]
