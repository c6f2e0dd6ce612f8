"""Unified daily document assembly.

This module merges the GA, sessions, and placements aggregations into
one per-day document keyed by FI and by FI instance. Every FI or
instance seen by any source gets an entry; sources without data for it
contribute zero-filled sections.
"""

from __future__ import annotations

from typing import Any, Mapping

from core.constants import UNKNOWN_FI
from transforms.buckets import GaBucket, PlacementBucket, SessionBucket
from transforms.key_normalizer import (
    canonical_instance,
    choose_instance_display,
    split_fi_instance_key,
)


def build_daily_document(
    day: str,
    *,
    ga_by_fi: Mapping[str, GaBucket],
    ga_by_instance: Mapping[str, GaBucket],
    sessions_by_fi: Mapping[str, SessionBucket],
    sessions_by_instance: Mapping[str, SessionBucket],
    placements_by_fi: Mapping[str, PlacementBucket],
    placements_by_instance: Mapping[str, PlacementBucket],
) -> dict[str, Any]:
    """Build the daily rollup document.

    Args:
        day: ISO date of the document.
        ga_by_fi: GA per-FI buckets.
        ga_by_instance: GA per-instance buckets.
        sessions_by_fi: Sessions per-FI buckets.
        sessions_by_instance: Sessions per-instance buckets.
        placements_by_fi: Placements per-FI buckets.
        placements_by_instance: Placements per-instance buckets.

    Returns:
        Document ``{date, sources, fi, fi_instances}``.
    """
    fi_keys = sorted(set(ga_by_fi) | set(sessions_by_fi) | set(placements_by_fi))
    fi_entries = {
        fi_key: _build_fi_entry(
            fi_key, ga_by_fi.get(fi_key), sessions_by_fi.get(fi_key), placements_by_fi.get(fi_key)
        )
        for fi_key in fi_keys
    }
    instance_keys = sorted(
        set(ga_by_instance) | set(sessions_by_instance) | set(placements_by_instance)
    )
    instance_entries = {
        instance_key: _build_instance_entry(
            instance_key,
            ga_by_instance.get(instance_key),
            sessions_by_instance.get(instance_key),
            placements_by_instance.get(instance_key),
        )
        for instance_key in instance_keys
    }
    return {
        "date": day,
        "sources": {
            "ga": bool(ga_by_fi),
            "sis_sessions": bool(sessions_by_fi),
            "sis_placements": bool(placements_by_fi),
        },
        "fi": fi_entries,
        "fi_instances": instance_entries,
    }


def _build_fi_entry(
    fi_key: str,
    ga: GaBucket | None,
    sessions: SessionBucket | None,
    placements: PlacementBucket | None,
) -> dict[str, Any]:
    ga = ga or GaBucket(fi_lookup_key=fi_key)
    sessions = sessions or SessionBucket(fi_lookup_key=fi_key)
    placements = placements or PlacementBucket(fi_lookup_key=fi_key)
    return {
        "ga": ga.counters(),
        "ga_instances": _dedupe_instances(ga.instances),
        "sessions": sessions.section(),
        "placements": placements.section(),
    }


def _build_instance_entry(
    instance_key: str,
    ga: GaBucket | None,
    sessions: SessionBucket | None,
    placements: PlacementBucket | None,
) -> dict[str, Any]:
    parsed_fi, parsed_instance = split_fi_instance_key(instance_key)
    present = [bucket for bucket in (ga, sessions, placements) if bucket is not None]
    fi_lookup_key = next(
        (bucket.fi_lookup_key for bucket in present if bucket.fi_lookup_key),
        parsed_fi or UNKNOWN_FI,
    )
    instance = choose_instance_display(*(bucket.instance for bucket in present), parsed_instance)
    return {
        "fi_lookup_key": fi_lookup_key,
        "instance": instance,
        "is_test": any(bucket.is_test for bucket in present),
        "ga": (ga or GaBucket(fi_lookup_key=fi_lookup_key)).counters(),
        "sessions": (sessions or SessionBucket(fi_lookup_key=fi_lookup_key)).section(),
        "placements": (placements or PlacementBucket(fi_lookup_key=fi_lookup_key)).section(),
    }


def _dedupe_instances(displays: list[str]) -> list[str]:
    unique: list[str] = []
    seen: set[str] = set()
    for display in displays:
        if not display:
            continue
        normalized = canonical_instance(display)
        if normalized in seen:
            continue
        seen.add(normalized)
        unique.append(display)
    return unique
