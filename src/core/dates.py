"""ISO date parsing and range enumeration.

Rollups are keyed by UTC calendar day in ``YYYY-MM-DD`` form.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
import re
from typing import Sequence

from core.errors import RollupIngestError

_ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def today_utc() -> str:
    """Return the current UTC date in ISO form."""
    return datetime.now(timezone.utc).date().isoformat()


def validate_iso_date(value: str) -> str:
    """Validate one ISO date string.

    Args:
        value: Candidate date string.

    Returns:
        The unchanged date string.

    Raises:
        RollupIngestError: If value is not a real ``YYYY-MM-DD`` date.
    """
    if not _ISO_DATE_PATTERN.match(value):
        raise RollupIngestError(f'Invalid date "{value}". Use YYYY-MM-DD.')
    try:
        date.fromisoformat(value)
    except ValueError as error:
        raise RollupIngestError(f'Invalid date "{value}": {error}. Use YYYY-MM-DD.') from error
    return value


def enumerate_dates(start_date: str, end_date: str) -> list[str]:
    """List every ISO date from start to end inclusive.

    Raises:
        RollupIngestError: If either date is invalid or start is after end.
    """
    start = date.fromisoformat(validate_iso_date(start_date))
    end = date.fromisoformat(validate_iso_date(end_date))
    if start > end:
        raise RollupIngestError(f"Start date {start_date} must be <= end date {end_date}.")
    days = (end - start).days
    return [(start + timedelta(days=offset)).isoformat() for offset in range(days + 1)]


def parse_date_args(argv: Sequence[str]) -> tuple[str, str]:
    """Parse positional date arguments into an inclusive range.

    No arguments means today (UTC), one argument a single day, and two
    arguments an inclusive range.

    Args:
        argv: Zero, one, or two ISO date strings.

    Returns:
        Tuple of start and end dates.

    Raises:
        RollupIngestError: If arguments are invalid.
    """
    if not argv:
        today = today_utc()
        return today, today
    if len(argv) == 1:
        day = validate_iso_date(argv[0])
        return day, day
    if len(argv) == 2:
        start_date = validate_iso_date(argv[0])
        end_date = validate_iso_date(argv[1])
        if start_date > end_date:
            raise RollupIngestError(f"Start date {start_date} must be <= end date {end_date}.")
        return start_date, end_date
    raise RollupIngestError("Expected at most two dates: [START_DATE] [END_DATE].")
