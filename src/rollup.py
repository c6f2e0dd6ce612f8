"""Public SDK surface for daily FI rollups.

This module provides a stable import path for rollup consumers.
It re-exports the range driver, document builder, and typed options.
"""

from __future__ import annotations

from core.config import RollupConfig
from core.types import DailyRangeOptions, RangeBuildResult
from ingest.pipeline import DailyRollupRunner, build_daily_from_raw_range
from store.daily_document import build_daily_document
from store.daily_writer import list_daily_dates, read_daily_file, write_daily_file

__all__ = [
    "DailyRangeOptions",
    "DailyRollupRunner",
    "RangeBuildResult",
    "RollupConfig",
    "build_daily_document",
    "build_daily_from_raw_range",
    "list_daily_dates",
    "read_daily_file",
    "write_daily_file",
]
