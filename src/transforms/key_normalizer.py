"""FI and instance key normalization.

This module maps raw FI lookup keys, instance names, and funnel hostnames
into the canonical ``(fi, instance)`` key space shared by every source.
All functions are pure and total: unusable input falls back to
``unknown`` rather than raising.
"""

from __future__ import annotations

import re
from typing import Mapping

from core.constants import (
    CARDUPDATR_HOST_SUFFIX,
    DEFAULT_INSTANCE_DISPLAY_OVERRIDES,
    FI_INSTANCE_KEY_SEPARATOR,
    LEGACY_DEFAULT_FI_KEY,
    LEGACY_PROD_ALIAS,
    LEGACY_PROD_ALIAS_CANONICAL,
    UNKNOWN_FI,
    UNKNOWN_INSTANCE,
)
from core.types import CanonicalKey, HostResolution, NormalizationTables

_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]")
_DISPLAY_SEPARATORS = re.compile(r"[\s_]+")


def normalize_fi_key(value: object) -> str:
    """Return the trimmed, lower-cased FI lookup key, or empty string."""
    if not value:
        return ""
    return str(value).strip().lower()


def canonical_instance(value: object) -> str:
    """Return the comparison form of an instance name.

    Lower-cases and strips every character outside ``[a-z0-9]``.

    Args:
        value: Raw instance value.

    Returns:
        Canonical instance, ``unknown`` when nothing remains.
    """
    if not value:
        return UNKNOWN_INSTANCE
    normalized = _NON_ALPHANUMERIC.sub("", str(value).strip().lower())
    return normalized or UNKNOWN_INSTANCE


def format_instance_display(
    value: object,
    overrides: Mapping[str, str] = DEFAULT_INSTANCE_DISPLAY_OVERRIDES,
) -> str:
    """Return the display form of an instance name.

    Whitespace and underscore runs collapse to one hyphen, then the
    override table substitutes known aliases.

    Args:
        value: Raw instance value.
        overrides: Formatted display name to preferred alias.

    Returns:
        Display instance, ``unknown`` when empty.
    """
    if not value:
        return UNKNOWN_INSTANCE
    base = _DISPLAY_SEPARATORS.sub("-", str(value).strip().lower())
    display = base or UNKNOWN_INSTANCE
    return overrides.get(display, display)


def resolve_fi_from_host(host: object) -> HostResolution | None:
    """Infer FI and instance from a ``*.cardupdatr.app`` hostname.

    ``acme.cardupdatr.app`` resolves to ``acme``/``acme`` and
    ``acme.prod.cardupdatr.app`` to ``acme``/``prod``. The legacy
    ``default.advancial-prod`` host collapses onto the ``advancial-prod`` FI.

    Args:
        host: Raw hostname.

    Returns:
        Host resolution, or None for hosts outside the funnel domain.
    """
    if not host:
        return None
    hostname = str(host).strip().lower()
    if not hostname.endswith(CARDUPDATR_HOST_SUFFIX):
        return None
    prefix = hostname[: -len(CARDUPDATR_HOST_SUFFIX)]
    if not prefix:
        return None
    parts = prefix.split(".")
    if len(parts) == 1:
        return HostResolution(fi_key=parts[0], instance=parts[0])
    fi_key = parts[0]
    instance = parts[1] or parts[0]
    if fi_key == LEGACY_DEFAULT_FI_KEY and instance == LEGACY_PROD_ALIAS:
        return HostResolution(fi_key=LEGACY_PROD_ALIAS, instance=instance)
    return HostResolution(fi_key=fi_key, instance=instance)


def make_fi_instance_key(fi_key: object, instance: object) -> str:
    """Build the ``<fi>__<instance>`` key used by per-instance maps."""
    return f"{normalize_fi_key(fi_key)}{FI_INSTANCE_KEY_SEPARATOR}{canonical_instance(instance)}"


def split_fi_instance_key(key: str) -> tuple[str, str]:
    """Split a per-instance key back into FI and instance parts."""
    if FI_INSTANCE_KEY_SEPARATOR not in key:
        return key, UNKNOWN_INSTANCE
    fi_key, instance = key.split(FI_INSTANCE_KEY_SEPARATOR, 1)
    return fi_key, instance or UNKNOWN_INSTANCE


def adjust_instance_for_fi(fi_lookup_key: object, instance_value: object) -> object:
    """Map the ``default`` instance of the ``advancial-prod`` FI onto its own name."""
    fi_norm = normalize_fi_key(fi_lookup_key)
    instance_norm = canonical_instance(instance_value)
    if fi_norm == LEGACY_PROD_ALIAS and instance_norm == LEGACY_DEFAULT_FI_KEY:
        return LEGACY_PROD_ALIAS
    return instance_value


def adjust_fi_lookup_for_instance(fi_lookup_key: object, instance_value: object) -> object:
    """Map the ``default`` FI seen on the ``advancial-prod`` instance onto that FI."""
    fi_norm = normalize_fi_key(fi_lookup_key)
    instance_norm = canonical_instance(instance_value)
    if fi_norm == LEGACY_DEFAULT_FI_KEY and instance_norm == LEGACY_PROD_ALIAS_CANONICAL:
        return LEGACY_PROD_ALIAS
    return fi_lookup_key


def is_test_instance_name(value: object, test_instances: frozenset[str]) -> bool:
    """Return whether an instance is on the test allowlist (canonical exact match)."""
    if not value:
        return False
    return canonical_instance(value) in test_instances


def canonical_record_key(
    fi_key: object,
    instance_value: object,
    tables: NormalizationTables,
    *,
    collapse_legacy_fi: bool = True,
) -> CanonicalKey:
    """Derive the canonical identity of one raw record.

    Args:
        fi_key: Resolved FI lookup key.
        instance_value: Raw instance value.
        tables: Injected override tables.
        collapse_legacy_fi: Also remap the ``default`` FI by instance.

    Returns:
        Canonical record key.
    """
    adjusted_instance = adjust_instance_for_fi(fi_key, instance_value)
    if collapse_legacy_fi:
        fi_key = adjust_fi_lookup_for_instance(fi_key, adjusted_instance) or fi_key
    fi_norm = normalize_fi_key(fi_key) or UNKNOWN_FI
    display = format_instance_display(adjusted_instance, tables.instance_display_overrides)
    instance_norm = canonical_instance(display)
    return CanonicalKey(
        fi_key=fi_norm,
        instance=display,
        instance_norm=instance_norm,
        is_test=is_test_instance_name(instance_norm, tables.test_instances),
        bucket_key=make_fi_instance_key(fi_norm, instance_norm),
    )


def ensure_instance_display(displays: list[str], display: str) -> list[str]:
    """Add a display form unless its canonical form is already present.

    The first display seen for a canonical instance wins and the list
    stays sorted.
    """
    if not display:
        return displays
    normalized = canonical_instance(display)
    if any(canonical_instance(value) == normalized for value in displays):
        return displays
    displays.append(display)
    displays.sort()
    return displays


def choose_instance_display(*values: object) -> str:
    """Pick the most descriptive display among candidate instance names.

    Hyphenated names are preferred, then the first non-``unknown`` name.
    """
    candidates = [str(value) for value in values if value and str(value) != UNKNOWN_INSTANCE]
    for candidate in candidates:
        if "-" in candidate:
            return candidate
    return candidates[0] if candidates else UNKNOWN_INSTANCE
