"""Unit tests for raw field accessors."""

from __future__ import annotations

from dataclasses import fields

import pytest

from transforms.field_access import FieldCandidates, coerce_number


def test_first_respects_candidate_order() -> None:
    """Earlier candidates should win over later ones."""
    candidates = FieldCandidates(("_instance", "instance"))

    assert candidates.first({"instance": "b", "_instance": "a"}) == "a"


def test_first_skips_falsy_values_by_default() -> None:
    """Empty strings fall through to the next candidate."""
    candidates = FieldCandidates(("_instance", "instance"))

    assert candidates.first({"_instance": "", "instance": "prod"}) == "prod"


def test_first_keeps_zero_when_requested() -> None:
    """Numeric candidates can keep an explicit zero."""
    candidates = FieldCandidates(("active_users", "views"), keep_falsy=True)

    assert candidates.first({"active_users": 0, "views": 7}) == 0


def test_text_returns_empty_string_when_absent() -> None:
    """Missing text fields render as an empty string."""
    assert FieldCandidates(("page",)).text({}) == ""


@pytest.mark.parametrize(
    ("value", "expected"),
    [(3, 3), ("4", 4), (2.5, 2.5), (None, 0), ("abc", 0), (float("nan"), 0), ("inf", 0), ({}, 0)],
)
def test_coerce_number_maps_invalid_values_to_zero(value: object, expected: float) -> None:
    """Unparseable or non-finite values should count as zero."""
    assert coerce_number(value) == expected


def test_candidates_carry_only_keys_and_falsy_policy() -> None:
    """Candidate lists are defined by their keys and falsy handling alone."""
    assert [field.name for field in fields(FieldCandidates)] == ["keys", "keep_falsy"]
