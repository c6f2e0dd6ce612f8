"""Daily rollup range orchestration.

This module loads the FI registry and override tables once, then builds
and writes one daily document per date in an inclusive range. Days are
processed strictly one after another; each day's aggregation starts
from fresh maps.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from core.config import RollupConfig
from core.dates import enumerate_dates
from core.logging_config import get_logger
from core.types import (
    DailyRangeOptions,
    NormalizationTables,
    RangeBuildResult,
    RawDayPayloads,
    RegistryIndex,
)
from ingest.raw_storage import read_raw_day
from store.daily_document import build_daily_document
from store.daily_writer import write_daily_file
from transforms.ga_aggregation import GA_RECORDS_FIELD, aggregate_ga
from transforms.normalization_tables import load_normalization_tables
from transforms.placement_aggregation import PLACEMENTS_RECORDS_FIELD, aggregate_placements
from transforms.raw_payload import usable_records
from transforms.registry_resolver import build_registry_index, load_fi_registry
from transforms.session_aggregation import SESSIONS_RECORDS_FIELD, aggregate_sessions

_LOGGER = get_logger(__name__)


class DailyRollupRunner:
    """Runner that rebuilds daily documents from raw day payloads."""

    def __init__(
        self,
        config: RollupConfig,
        *,
        registry_index: RegistryIndex | None = None,
        tables: NormalizationTables | None = None,
    ) -> None:
        self._config = config
        if registry_index is None:
            registry_index = build_registry_index(load_fi_registry(config.registry_path))
        self._registry_index = registry_index
        self._tables = tables or load_normalization_tables(config.tables_path)

    def run(self, options: DailyRangeOptions) -> RangeBuildResult:
        """Build every date in the range and return written paths and skips."""
        end_date = options.end_date or options.start_date
        written_paths: list[Path] = []
        skipped_dates: list[str] = []
        for day in enumerate_dates(options.start_date, end_date):
            written_path = self.build_day(day)
            if written_path is None:
                skipped_dates.append(day)
            else:
                written_paths.append(written_path)
        _LOGGER.info(
            "daily_range_completed",
            start_date=options.start_date,
            end_date=end_date,
            written=len(written_paths),
            skipped=len(skipped_dates),
        )
        return RangeBuildResult(written_paths=tuple(written_paths), skipped_dates=tuple(skipped_dates))

    def build_day(self, day: str) -> Path | None:
        """Build and write one day, None when the day was skipped."""
        payloads = read_raw_day(self._config.raw_dir, day)
        if not _has_any_records(payloads):
            _LOGGER.warning("daily_build_skipped", day=day, reason="no raw records for any source")
            return None
        document = self.build_document(payloads)
        written_path = write_daily_file(self._config.daily_dir, day, document)
        _LOGGER.info("daily_written", day=day, path=str(written_path))
        return written_path

    def build_document(self, payloads: RawDayPayloads) -> dict[str, Any]:
        """Aggregate one day's payloads into its daily document."""
        ga = aggregate_ga(payloads.ga, self._registry_index, self._tables)
        sessions = aggregate_sessions(payloads.sessions, self._registry_index, self._tables)
        placements = aggregate_placements(payloads.placements, self._registry_index, self._tables)
        return build_daily_document(
            payloads.day,
            ga_by_fi=ga.by_fi,
            ga_by_instance=ga.by_instance,
            sessions_by_fi=sessions.by_fi,
            sessions_by_instance=sessions.by_instance,
            placements_by_fi=placements.by_fi,
            placements_by_instance=placements.by_instance,
        )


def build_daily_from_raw_range(options: DailyRangeOptions, config: RollupConfig) -> RangeBuildResult:
    """Rebuild daily documents for an inclusive date range.

    Args:
        options: Start and end dates.
        config: Runtime configuration.

    Returns:
        Written document paths and skipped dates.

    Raises:
        RollupIngestError: If the date range is invalid.
        RollupStoreError: If a document cannot be written.
    """
    return DailyRollupRunner(config).run(options)


def _has_any_records(payloads: RawDayPayloads) -> bool:
    """Return whether any source payload carries a record aggregation would use."""
    sources = (
        (payloads.ga, GA_RECORDS_FIELD),
        (payloads.sessions, SESSIONS_RECORDS_FIELD),
        (payloads.placements, PLACEMENTS_RECORDS_FIELD),
    )
    return any(usable_records(payload, records_field) for payload, records_field in sources)
