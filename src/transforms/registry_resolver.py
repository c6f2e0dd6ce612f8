"""FI registry loading and key resolution.

The registry is advisory: it canonicalizes lookup keys and maps FI
display names to lookup keys, but never overrides an explicit key on a
record. A missing or unreadable registry degrades to pass-through.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

from core.logging_config import get_logger
from core.types import RegistryIndex
from transforms.key_normalizer import normalize_fi_key

_LOGGER = get_logger(__name__)


def load_fi_registry(registry_path: Path) -> dict[str, Any]:
    """Read the FI registry file.

    Args:
        registry_path: Registry JSON path.

    Returns:
        Registry entries keyed by registry key, empty when unavailable.
    """
    if not registry_path.exists():
        _LOGGER.warning("registry_missing", path=str(registry_path))
        return {}
    try:
        payload = json.loads(registry_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as error:
        _LOGGER.warning("registry_corrupt", path=str(registry_path), error=str(error))
        return {}
    if not isinstance(payload, dict):
        _LOGGER.warning(
            "registry_corrupt",
            path=str(registry_path),
            error="expected JSON object at top level",
        )
        return {}
    return payload


def build_registry_index(registry: Mapping[str, Any] | None) -> RegistryIndex:
    """Precompute case-insensitive lookup and name indexes.

    Args:
        registry: Registry entries, each ``{fi_name, fi_lookup_key, ...}``.

    Returns:
        Index used for O(1) record-level resolution.
    """
    by_lookup: dict[str, str] = {}
    by_name: dict[str, str] = {}
    for entry in (registry or {}).values():
        if not isinstance(entry, Mapping):
            continue
        lookup = normalize_fi_key(entry.get("fi_lookup_key") or entry.get("fi_name"))
        name = normalize_fi_key(entry.get("fi_name"))
        if lookup:
            by_lookup[lookup] = lookup
        if name and lookup:
            by_name[name] = lookup
    return RegistryIndex(by_lookup=by_lookup, by_name=by_name)


def resolve_fi_key(
    preferred_key: object,
    fallback_name: object,
    index: RegistryIndex,
) -> str | None:
    """Resolve the FI lookup key for one record.

    An explicit key always wins; the registry only canonicalizes it.
    Without one, the FI name is resolved through the registry.

    Args:
        preferred_key: Explicit lookup key on the record, if any.
        fallback_name: FI display name on the record, if any.
        index: Precomputed registry index.

    Returns:
        Lookup key, or None when neither input resolves.
    """
    normalized_preferred = normalize_fi_key(preferred_key)
    if normalized_preferred:
        return index.by_lookup.get(normalized_preferred, normalized_preferred)
    normalized_name = normalize_fi_key(fallback_name)
    if normalized_name:
        return index.by_name.get(normalized_name)
    return None
