"""Session outcome aggregation."""

from __future__ import annotations

from typing import Any, Mapping

from core.constants import SESSIONS_SOURCE, UNKNOWN_FI, UNKNOWN_INSTANCE
from core.types import NormalizationTables, RegistryIndex
from transforms.buckets import AggregationResult, BucketMap, SessionBucket, build_result
from transforms.field_access import FieldCandidates, coerce_number
from transforms.key_normalizer import canonical_record_key
from transforms.normalization_tables import build_normalization_tables
from transforms.raw_payload import payload_records
from transforms.registry_resolver import resolve_fi_key

SESSIONS_RECORDS_FIELD = "sessions"
SESSION_FI_KEY_FIELDS = FieldCandidates(
    ("financial_institution_lookup_key", "fi_lookup_key")
)
SESSION_FI_NAME_FIELDS = FieldCandidates(
    ("fi_name", "financial_institution", "financial_institution_name", "institution"),
)
SESSION_INSTANCE_FIELDS = FieldCandidates(
    ("_instance", "instance", "instance_name", "org_name", "instance_slug"),
)


def aggregate_sessions(
    payload: Mapping[str, Any] | None,
    registry_index: RegistryIndex,
    tables: NormalizationTables | None = None,
) -> AggregationResult[SessionBucket]:
    """Aggregate one day of sessions by FI and by FI instance.

    Args:
        payload: Raw sessions day payload ``{date, sessions, error?}``.
        registry_index: Precomputed FI registry index.
        tables: Override tables, defaults when omitted.

    Returns:
        Per-FI and per-instance session counters.
    """
    tables = tables or build_normalization_tables()
    buckets: BucketMap[SessionBucket] = BucketMap()
    for session in payload_records(payload, SESSIONS_RECORDS_FIELD, source=SESSIONS_SOURCE):
        fi_key = resolve_fi_key(
            SESSION_FI_KEY_FIELDS.first(session),
            SESSION_FI_NAME_FIELDS.first(session),
            registry_index,
        )
        key = canonical_record_key(
            fi_key or UNKNOWN_FI,
            SESSION_INSTANCE_FIELDS.first(session) or UNKNOWN_INSTANCE,
            tables,
        )
        bucket = buckets.get_or_insert(
            key.bucket_key,
            lambda: SessionBucket(
                fi_lookup_key=key.fi_key, instance=key.instance, is_test=key.is_test
            ),
        )
        bucket.is_test = bucket.is_test or key.is_test
        bucket.record_session(
            coerce_number(session.get("total_jobs")),
            coerce_number(session.get("successful_jobs")),
        )
    return build_result(buckets, lambda fi_key: SessionBucket(fi_lookup_key=fi_key))
