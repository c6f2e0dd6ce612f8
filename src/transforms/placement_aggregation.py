"""Card placement outcome aggregation."""

from __future__ import annotations

from typing import Any, Mapping

from core.constants import (
    BILLABLE_TERMINATION_TYPE,
    PLACEMENTS_SOURCE,
    SUCCESSFUL_PLACEMENT_STATUS,
    UNKNOWN_FI,
    UNKNOWN_INSTANCE,
    UNKNOWN_TERMINATION,
)
from core.types import NormalizationTables, RegistryIndex
from transforms.buckets import AggregationResult, BucketMap, PlacementBucket, build_result
from transforms.field_access import FieldCandidates
from transforms.key_normalizer import canonical_record_key
from transforms.normalization_tables import build_normalization_tables
from transforms.raw_payload import payload_records
from transforms.registry_resolver import resolve_fi_key

PLACEMENTS_RECORDS_FIELD = "placements"
PLACEMENT_FI_KEY_FIELDS = FieldCandidates(
    ("fi_lookup_key", "financial_institution_lookup_key")
)
PLACEMENT_FI_NAME_FIELDS = FieldCandidates(
    ("fi_name", "financial_institution", "issuer_name")
)
PLACEMENT_INSTANCE_FIELDS = FieldCandidates(
    ("_instance", "instance", "instance_name", "org_name")
)
PLACEMENT_TERMINATION_FIELDS = FieldCandidates(
    ("termination_type", "termination", "status")
)


def aggregate_placements(
    payload: Mapping[str, Any] | None,
    registry_index: RegistryIndex,
    tables: NormalizationTables | None = None,
) -> AggregationResult[PlacementBucket]:
    """Aggregate one day of placements by FI and by FI instance.

    Args:
        payload: Raw placements day payload ``{date, placements, errors?, error?}``.
        registry_index: Precomputed FI registry index.
        tables: Override tables, defaults when omitted.

    Returns:
        Per-FI and per-instance placement counters.
    """
    tables = tables or build_normalization_tables()
    buckets: BucketMap[PlacementBucket] = BucketMap()
    for placement in payload_records(
        payload, PLACEMENTS_RECORDS_FIELD, source=PLACEMENTS_SOURCE
    ):
        fi_key = resolve_fi_key(
            PLACEMENT_FI_KEY_FIELDS.first(placement),
            PLACEMENT_FI_NAME_FIELDS.first(placement),
            registry_index,
        )
        key = canonical_record_key(
            fi_key or UNKNOWN_FI,
            PLACEMENT_INSTANCE_FIELDS.first(placement) or UNKNOWN_INSTANCE,
            tables,
        )
        bucket = buckets.get_or_insert(
            key.bucket_key,
            lambda: PlacementBucket(
                fi_lookup_key=key.fi_key, instance=key.instance, is_test=key.is_test
            ),
        )
        bucket.is_test = bucket.is_test or key.is_test
        bucket.record_placement(termination_reason(placement), is_successful_placement(placement))
    return build_result(buckets, lambda fi_key: PlacementBucket(fi_lookup_key=fi_key))


def termination_reason(placement: Mapping[str, Any]) -> str:
    """Return the upper-cased termination reason, ``UNKNOWN`` if absent."""
    reason = PLACEMENT_TERMINATION_FIELDS.text(placement) or UNKNOWN_TERMINATION
    return reason.upper()


def is_successful_placement(placement: Mapping[str, Any]) -> bool:
    """Return whether status or termination type marks a successful placement."""
    status = str(placement.get("status") or "").upper()
    termination = str(placement.get("termination_type") or "").upper()
    return status == SUCCESSFUL_PLACEMENT_STATUS or termination == BILLABLE_TERMINATION_TYPE
