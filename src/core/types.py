"""Shared typed models.

This module defines immutable data models used by the normalizer,
aggregators, document builder, and range driver to keep interfaces
explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping


@dataclass(frozen=True)
class HostResolution:
    """FI and instance inferred from a funnel hostname.

    Attributes:
        fi_key: FI lookup key taken from the first host label.
        instance: Instance name taken from the second host label.
    """

    fi_key: str
    instance: str


@dataclass(frozen=True)
class CanonicalKey:
    """Canonical identity of one raw record within a day.

    Attributes:
        fi_key: Normalized FI lookup key.
        instance: Display form of the instance name.
        instance_norm: Comparison form of the instance name.
        is_test: Whether the instance is on the test allowlist.
        bucket_key: ``<fi>__<instance>`` key for per-instance maps.
    """

    fi_key: str
    instance: str
    instance_norm: str
    is_test: bool
    bucket_key: str


@dataclass(frozen=True)
class RegistryIndex:
    """Case-insensitive lookups precomputed from the FI registry.

    Attributes:
        by_lookup: Normalized lookup key to canonical lookup key.
        by_name: Normalized FI display name to canonical lookup key.
    """

    by_lookup: Mapping[str, str] = field(default_factory=dict)
    by_name: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class NormalizationTables:
    """Static override tables injected into aggregation.

    Attributes:
        instance_display_overrides: Formatted display name to preferred alias.
        test_instances: Canonical forms of known test instances.
    """

    instance_display_overrides: Mapping[str, str]
    test_instances: frozenset[str]

    def __post_init__(self) -> None:
        frozen_overrides = MappingProxyType(dict(self.instance_display_overrides))
        object.__setattr__(self, "instance_display_overrides", frozen_overrides)


@dataclass(frozen=True)
class RawDayPayloads:
    """Raw source payloads loaded for one day.

    Attributes:
        day: ISO date of the payloads.
        ga: GA payload, None when the file is absent.
        sessions: Sessions payload, None when the file is absent.
        placements: Placements payload, None when the file is absent.
    """

    day: str
    ga: Mapping[str, Any] | None = None
    sessions: Mapping[str, Any] | None = None
    placements: Mapping[str, Any] | None = None


@dataclass(frozen=True)
class DailyRangeOptions:
    """Inclusive date range for a rollup build.

    Attributes:
        start_date: First ISO date to build.
        end_date: Last ISO date to build, defaults to start_date.
    """

    start_date: str
    end_date: str | None = None


@dataclass(frozen=True)
class RangeBuildResult:
    """Outcome of a range build.

    Attributes:
        written_paths: Daily documents written, in date order.
        skipped_dates: Dates skipped because no source had data.
    """

    written_paths: tuple[Path, ...]
    skipped_dates: tuple[str, ...]
