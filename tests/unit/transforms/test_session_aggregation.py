"""Unit tests for session aggregation."""

from __future__ import annotations

from core.types import RegistryIndex
from transforms.session_aggregation import aggregate_sessions

_EMPTY_INDEX = RegistryIndex()


def test_aggregate_sessions_counts_single_session() -> None:
    """One session with jobs should fill every counter."""
    payload = {
        "sessions": [
            {"total_jobs": 3, "successful_jobs": 1, "fi_lookup_key": "acme", "_instance": "Instance1"}
        ]
    }

    result = aggregate_sessions(payload, _EMPTY_INDEX)

    assert result.by_instance["acme__instance1"].section() == {
        "total": 1,
        "with_jobs": 1,
        "with_success": 1,
        "without_jobs": 0,
        "total_jobs": 3,
        "successful_jobs": 1,
    }


def test_aggregate_sessions_by_fi_equals_sum_of_instances() -> None:
    """Per-FI counters must equal the sum over that FI's instances."""
    payload = {
        "sessions": [
            {"fi_lookup_key": "acme", "_instance": "east", "total_jobs": 2, "successful_jobs": 2},
            {"fi_lookup_key": "acme", "_instance": "west", "total_jobs": 0},
            {"fi_lookup_key": "acme", "_instance": "west", "total_jobs": "x", "successful_jobs": None},
            {"fi_lookup_key": "zenith", "_instance": "prod", "total_jobs": 1},
        ]
    }

    result = aggregate_sessions(payload, _EMPTY_INDEX)
    acme_instances = [b for b in result.by_instance.values() if b.fi_lookup_key == "acme"]

    for counter in ("total_sessions", "sessions_with_jobs", "sessions_with_success", "total_jobs_sum"):
        expected = sum(getattr(bucket, counter) for bucket in acme_instances)
        assert getattr(result.by_fi["acme"], counter) == expected
    assert result.by_fi["acme"].section()["without_jobs"] == 2


def test_aggregate_sessions_collapses_legacy_default_fi() -> None:
    """Sessions from the default FI on the legacy instance join that FI."""
    payload = {"sessions": [{"fi_lookup_key": "default", "_instance": "advancial-prod"}]}

    result = aggregate_sessions(payload, _EMPTY_INDEX)

    assert list(result.by_fi) == ["advancial-prod"]


def test_aggregate_sessions_maps_default_instance_of_legacy_fi() -> None:
    """The default instance of the legacy FI is renamed after the FI."""
    payload = {"sessions": [{"fi_lookup_key": "advancial-prod", "_instance": "default"}]}

    result = aggregate_sessions(payload, _EMPTY_INDEX)

    assert list(result.by_instance) == ["advancial-prod__advancialprod"]


def test_aggregate_sessions_without_fi_uses_unknown_fi() -> None:
    """Sessions lacking FI fields fall back to unknown_fi."""
    result = aggregate_sessions({"sessions": [{"total_jobs": 1}]}, _EMPTY_INDEX)

    assert list(result.by_instance) == ["unknown_fi__unknown"]
