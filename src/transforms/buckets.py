"""Per-source accumulator buckets.

A bucket is created the first time a day's aggregation sees a given
``(fi, instance)`` pair, mutated by every later matching record, and
discarded once folded into the daily document. Per-FI buckets are never
fed raw records: they are the additive fold of per-instance buckets.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Generic, Iterator, Mapping, Protocol, TypeVar

from core.constants import UNKNOWN_INSTANCE
from transforms.key_normalizer import ensure_instance_display


class Bucket(Protocol):
    """Shared accumulator contract."""

    fi_lookup_key: str
    instance: str
    is_test: bool

    def absorb(self, other: "Bucket") -> None:
        """Add another bucket's counters into this one."""


BucketT = TypeVar("BucketT", bound=Bucket)


@dataclass
class GaBucket:
    """Funnel page-view counters."""

    fi_lookup_key: str
    instance: str = UNKNOWN_INSTANCE
    is_test: bool = False
    select_merchants: int | float = 0
    user_data_collection: int | float = 0
    credential_entry: int | float = 0
    instances: list[str] = field(default_factory=list)

    def add_views(self, stage: str, count: int | float) -> None:
        """Add views to one funnel stage counter."""
        setattr(self, stage, getattr(self, stage) + count)

    def absorb(self, other: "GaBucket") -> None:
        self.is_test = self.is_test or other.is_test
        self.select_merchants += other.select_merchants
        self.user_data_collection += other.user_data_collection
        self.credential_entry += other.credential_entry
        ensure_instance_display(self.instances, other.instance)

    def counters(self) -> dict[str, int | float]:
        return {
            "select_merchants": self.select_merchants,
            "user_data_collection": self.user_data_collection,
            "credential_entry": self.credential_entry,
        }


@dataclass
class SessionBucket:
    """Session outcome counters."""

    fi_lookup_key: str
    instance: str = UNKNOWN_INSTANCE
    is_test: bool = False
    total_sessions: int = 0
    sessions_with_jobs: int = 0
    sessions_with_success: int = 0
    total_jobs_sum: int | float = 0
    successful_jobs_sum: int | float = 0

    def record_session(self, total_jobs: int | float, successful_jobs: int | float) -> None:
        """Count one session and its job totals."""
        self.total_sessions += 1
        if total_jobs > 0:
            self.sessions_with_jobs += 1
        if successful_jobs > 0:
            self.sessions_with_success += 1
        self.total_jobs_sum += total_jobs
        self.successful_jobs_sum += successful_jobs

    def absorb(self, other: "SessionBucket") -> None:
        self.is_test = self.is_test or other.is_test
        self.total_sessions += other.total_sessions
        self.sessions_with_jobs += other.sessions_with_jobs
        self.sessions_with_success += other.sessions_with_success
        self.total_jobs_sum += other.total_jobs_sum
        self.successful_jobs_sum += other.successful_jobs_sum

    def section(self) -> dict[str, int | float]:
        """Render the document ``sessions`` section."""
        return {
            "total": self.total_sessions,
            "with_jobs": self.sessions_with_jobs,
            "with_success": self.sessions_with_success,
            "without_jobs": max(0, self.total_sessions - self.sessions_with_jobs),
            "total_jobs": self.total_jobs_sum,
            "successful_jobs": self.successful_jobs_sum,
        }


@dataclass
class PlacementBucket:
    """Card placement outcome counters."""

    fi_lookup_key: str
    instance: str = UNKNOWN_INSTANCE
    is_test: bool = False
    total_placements: int = 0
    successful_placements: int = 0
    by_termination: dict[str, int] = field(default_factory=dict)

    def record_placement(self, termination: str, successful: bool) -> None:
        """Count one placement under its termination reason."""
        self.total_placements += 1
        if successful:
            self.successful_placements += 1
        self.by_termination[termination] = self.by_termination.get(termination, 0) + 1

    def absorb(self, other: "PlacementBucket") -> None:
        self.is_test = self.is_test or other.is_test
        self.total_placements += other.total_placements
        self.successful_placements += other.successful_placements
        for termination, count in other.by_termination.items():
            self.by_termination[termination] = self.by_termination.get(termination, 0) + count

    def section(self) -> dict[str, object]:
        """Render the document ``placements`` section."""
        return {
            "total_placements": self.total_placements,
            "successful_placements": self.successful_placements,
            "by_termination": dict(sorted(self.by_termination.items())),
        }


class BucketMap(Generic[BucketT]):
    """Owned mapping of buckets with explicit get-or-insert creation."""

    def __init__(self) -> None:
        self._buckets: dict[str, BucketT] = {}

    def get_or_insert(self, key: str, create: Callable[[], BucketT]) -> BucketT:
        """Return the bucket for key, creating it on first access."""
        bucket = self._buckets.get(key)
        if bucket is None:
            bucket = create()
            self._buckets[key] = bucket
        return bucket

    def __contains__(self, key: object) -> bool:
        return key in self._buckets

    def __iter__(self) -> Iterator[str]:
        return iter(self._buckets)

    def __len__(self) -> int:
        return len(self._buckets)

    def as_dict(self) -> dict[str, BucketT]:
        return dict(self._buckets)


@dataclass(frozen=True)
class AggregationResult(Generic[BucketT]):
    """One source's day totals by FI and by FI instance."""

    by_fi: Mapping[str, BucketT] = field(default_factory=dict)
    by_instance: Mapping[str, BucketT] = field(default_factory=dict)


def fold_by_fi(
    by_instance: Mapping[str, BucketT],
    create: Callable[[str], BucketT],
) -> dict[str, BucketT]:
    """Sum per-instance buckets into per-FI buckets.

    Args:
        by_instance: Per-instance buckets for one source and day.
        create: Factory building an empty bucket for an FI key.

    Returns:
        Per-FI buckets keyed by the instances' FI lookup key.
    """
    by_fi: BucketMap[BucketT] = BucketMap()
    for entry in by_instance.values():
        fi_key = entry.fi_lookup_key
        fi_bucket = by_fi.get_or_insert(fi_key, lambda: create(fi_key))
        fi_bucket.absorb(entry)
    return by_fi.as_dict()


def build_result(
    buckets: BucketMap[BucketT],
    create: Callable[[str], BucketT],
) -> AggregationResult[BucketT]:
    """Freeze accumulated buckets into an aggregation result."""
    by_instance = buckets.as_dict()
    return AggregationResult(by_fi=fold_by_fi(by_instance, create), by_instance=by_instance)
