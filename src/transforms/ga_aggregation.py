"""GA funnel page-view aggregation.

Each GA row is attributed to an FI by, in order: an explicit key on the
row, the funnel hostname, a registry lookup by FI name, and finally
``unknown_fi``. Views count toward the first funnel stage whose path
prefix matches the row's page.
"""

from __future__ import annotations

from typing import Any, Mapping

from core.constants import GA_PAGE_STAGES, GA_SOURCE, UNKNOWN_FI, UNKNOWN_INSTANCE
from core.types import NormalizationTables, RegistryIndex
from transforms.buckets import AggregationResult, BucketMap, GaBucket, build_result
from transforms.field_access import FieldCandidates, coerce_number
from transforms.key_normalizer import canonical_record_key, resolve_fi_from_host
from transforms.normalization_tables import build_normalization_tables
from transforms.raw_payload import payload_records
from transforms.registry_resolver import resolve_fi_key

GA_RECORDS_FIELD = "rows"
GA_FI_KEY_FIELDS = FieldCandidates(("fi_key", "fi_lookup_key"))
GA_FI_NAME_FIELDS = FieldCandidates(("fi_name",))
GA_HOST_FIELDS = FieldCandidates(("host", "hostname"))
GA_INSTANCE_FIELDS = FieldCandidates(("instance", "host_instance"))
GA_PAGE_FIELDS = FieldCandidates(("page", "pagePath", "pathname"))
GA_COUNT_FIELDS = FieldCandidates(
    ("active_users", "activeUsers", "views", "screenPageViews"),
    keep_falsy=True,
)


def aggregate_ga(
    payload: Mapping[str, Any] | None,
    registry_index: RegistryIndex,
    tables: NormalizationTables | None = None,
) -> AggregationResult[GaBucket]:
    """Aggregate one day of GA rows by FI and by FI instance.

    Args:
        payload: Raw GA day payload ``{date, rows, error?}``.
        registry_index: Precomputed FI registry index.
        tables: Override tables, defaults when omitted.

    Returns:
        Per-FI and per-instance funnel counters.
    """
    tables = tables or build_normalization_tables()
    buckets: BucketMap[GaBucket] = BucketMap()
    for row in payload_records(payload, GA_RECORDS_FIELD, source=GA_SOURCE):
        _accumulate_row(buckets, row, registry_index, tables)
    return build_result(buckets, lambda fi_key: GaBucket(fi_lookup_key=fi_key))


def classify_page(page_path: str) -> str | None:
    """Return the funnel stage counter for a page path, or None."""
    for prefix, stage in GA_PAGE_STAGES:
        if page_path.startswith(prefix):
            return stage
    return None


def _accumulate_row(
    buckets: BucketMap[GaBucket],
    row: Mapping[str, Any],
    registry_index: RegistryIndex,
    tables: NormalizationTables,
) -> None:
    parsed_host = resolve_fi_from_host(GA_HOST_FIELDS.text(row))
    preferred_key = GA_FI_KEY_FIELDS.first(row) or (parsed_host.fi_key if parsed_host else None)
    fi_key = resolve_fi_key(preferred_key, GA_FI_NAME_FIELDS.first(row), registry_index)
    instance_value = (
        GA_INSTANCE_FIELDS.first(row)
        or (parsed_host.instance if parsed_host else None)
        or UNKNOWN_INSTANCE
    )
    key = canonical_record_key(
        fi_key or UNKNOWN_FI, instance_value, tables, collapse_legacy_fi=False
    )
    bucket = buckets.get_or_insert(
        key.bucket_key,
        lambda: GaBucket(fi_lookup_key=key.fi_key, instance=key.instance, is_test=key.is_test),
    )
    bucket.is_test = bucket.is_test or key.is_test
    stage = classify_page(GA_PAGE_FIELDS.text(row))
    if stage is not None:
        bucket.add_views(stage, coerce_number(GA_COUNT_FIELDS.first(row)))
