"""Field accessors for loosely-typed raw records.

Raw payloads name the same logical field differently depending on the
source and API version. Each logical field is declared once as an
ordered list of candidate keys evaluated in priority order.
"""

from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Any, Mapping


@dataclass(frozen=True)
class FieldCandidates:
    """Ordered candidate keys for one logical field.

    Attributes:
        keys: Candidate record keys in priority order.
        keep_falsy: Accept any non-None value, including 0 and "".
    """

    keys: tuple[str, ...]
    keep_falsy: bool = False

    def first(self, record: Mapping[str, Any]) -> Any:
        """Return the first usable candidate value, or None."""
        for key in self.keys:
            value = record.get(key)
            if value is None:
                continue
            if value or self.keep_falsy:
                return value
        return None

    def text(self, record: Mapping[str, Any]) -> str:
        """Return the first usable candidate as a string, empty if absent."""
        value = self.first(record)
        return "" if value is None else str(value)


def coerce_number(value: Any) -> int | float:
    """Coerce a raw numeric field, mapping non-finite or unparseable input to 0.

    Integral values are returned as ``int`` so counters serialize cleanly.
    """
    if value is None:
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number):
        return 0
    if number.is_integer():
        return int(number)
    return number
