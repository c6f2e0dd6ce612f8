"""Unit tests for GA funnel aggregation."""

from __future__ import annotations

from core.types import RegistryIndex
from transforms.ga_aggregation import aggregate_ga, classify_page
from transforms.registry_resolver import build_registry_index

_EMPTY_INDEX = RegistryIndex()


def test_aggregate_ga_buckets_page_views_by_host() -> None:
    """Rows from one host should fold into one FI instance."""
    payload = {
        "date": "2025-01-15",
        "rows": [
            {"host": "acme.instance1.cardupdatr.app", "page": "/select-merchants", "active_users": 5},
            {"host": "acme.instance1.cardupdatr.app", "page": "/credential-entry", "active_users": 2},
        ],
    }

    result = aggregate_ga(payload, _EMPTY_INDEX)

    assert result.by_fi["acme"].counters() == {
        "select_merchants": 5,
        "user_data_collection": 0,
        "credential_entry": 2,
    }
    assert list(result.by_instance) == ["acme__instance1"]


def test_aggregate_ga_explicit_key_wins_over_host() -> None:
    """An explicit FI key on the row outranks hostname inference."""
    payload = {
        "rows": [
            {
                "host": "acme.prod.cardupdatr.app",
                "fi_key": "Zenith",
                "page": "/user-data-collection",
                "views": 4,
            }
        ]
    }

    result = aggregate_ga(payload, _EMPTY_INDEX)

    assert list(result.by_instance) == ["zenith__prod"]


def test_aggregate_ga_resolves_name_then_unknown_fi() -> None:
    """Rows without key or host use the registry name, else unknown_fi."""
    index = build_registry_index({"z": {"fi_name": "Zenith Bank", "fi_lookup_key": "zenith"}})
    payload = {
        "rows": [
            {"fi_name": "Zenith Bank", "instance": "prod", "page": "/select-merchants", "views": 1},
            {"fi_name": "Nobody", "page": "/select-merchants", "views": 1},
        ]
    }

    result = aggregate_ga(payload, index)

    assert sorted(result.by_instance) == ["unknown_fi__unknown", "zenith__prod"]


def test_aggregate_ga_flags_test_instances_without_dropping() -> None:
    """Test-instance rows are aggregated and flagged."""
    payload = {
        "rows": [
            {"host": "acme.customer-dev.cardupdatr.app", "page": "/select-merchants", "views": 3},
        ]
    }

    result = aggregate_ga(payload, _EMPTY_INDEX)
    bucket = result.by_instance["acme__customerdev"]

    assert bucket.is_test is True and bucket.select_merchants == 3


def test_aggregate_ga_ignores_unmatched_pages_and_bad_counts() -> None:
    """Unmatched pages count nowhere and unparseable counts count as zero."""
    payload = {
        "rows": [
            {"host": "acme.cardupdatr.app", "page": "/settings", "views": 9},
            {"host": "acme.cardupdatr.app", "page": "/select-merchants", "views": "many"},
            "not-a-row",
        ]
    }

    result = aggregate_ga(payload, _EMPTY_INDEX)

    assert result.by_fi["acme"].counters() == {
        "select_merchants": 0,
        "user_data_collection": 0,
        "credential_entry": 0,
    }


def test_aggregate_ga_returns_empty_for_unavailable_source() -> None:
    """Absent or error-flagged payloads produce empty maps."""
    flagged = aggregate_ga({"rows": [{"host": "acme.cardupdatr.app"}], "error": "quota"}, _EMPTY_INDEX)
    missing = aggregate_ga(None, _EMPTY_INDEX)

    assert not flagged.by_fi and not flagged.by_instance
    assert not missing.by_fi and not missing.by_instance


def test_classify_page_uses_first_matching_prefix() -> None:
    """Stage classification is by fixed path prefix."""
    assert classify_page("/select-merchants/search") == "select_merchants"
    assert classify_page("/credential-entry") == "credential_entry"
    assert classify_page("/home") is None


def test_aggregate_ga_by_fi_equals_sum_of_instances() -> None:
    """Per-FI funnel counters must equal the sum over that FI's instances."""
    payload = {
        "rows": [
            {"host": "acme.east.cardupdatr.app", "page": "/select-merchants", "active_users": 4},
            {"host": "acme.west.cardupdatr.app", "page": "/select-merchants", "active_users": 1},
            {"host": "acme.west.cardupdatr.app", "page": "/credential-entry", "views": 2},
            {"host": "zenith.cardupdatr.app", "page": "/user-data-collection", "active_users": 3},
        ]
    }

    result = aggregate_ga(payload, _EMPTY_INDEX)
    acme_counters = [
        bucket.counters() for bucket in result.by_instance.values() if bucket.fi_lookup_key == "acme"
    ]

    for counter, value in result.by_fi["acme"].counters().items():
        assert value == sum(counters[counter] for counters in acme_counters)
    assert result.by_fi["acme"].counters()["select_merchants"] == 5
