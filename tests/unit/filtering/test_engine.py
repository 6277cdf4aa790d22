"""Tests for the generic record filter/sort engine."""

from __future__ import annotations

import pytest

from factoryenergy.domain.timestamps import parse_timestamp_ms
from factoryenergy.filtering import (
    DateRange,
    FilterField,
    PredicateKind,
    RecordFilterSortEngine,
    SortField,
    SortKind,
    SortSpec,
)


def _ms(text: str) -> int:
    return parse_timestamp_ms(text, field_name="text")


def _engine() -> RecordFilterSortEngine[dict[str, object]]:
    return RecordFilterSortEngine(
        (
            FilterField("kind", PredicateKind.EXACT),
            FilterField("zone", PredicateKind.CONTAINS),
            FilterField("search", PredicateKind.SEARCH, attributes=("title", "notes")),
            FilterField("min_value", PredicateKind.MIN, attributes=("value",)),
            FilterField("max_value", PredicateKind.MAX, attributes=("value",), aliases=("maxValue",)),
            FilterField("window", PredicateKind.DATE_RANGE, attributes=("at",)),
            FilterField("preset", PredicateKind.QUICK),
        ),
        quick_filters={"big": lambda record: (record.get("value") or 0) >= 100},
        sort_fields=(
            SortField("value", "value"),
            SortField("at", "at", kind=SortKind.TIMESTAMP),
            SortField("level", "level", kind=SortKind.RANK, rank={"high": 3, "mid": 2, "low": 1}),
            SortField("title", "title", kind=SortKind.TEXT, descending=False),
        ),
    )


_RECORDS: tuple[dict[str, object], ...] = (
    {"id": 1, "kind": "a", "zone": "line_1", "title": "Pump Leak", "value": 150, "at": _ms("2025-03-01T10:00:00Z"), "level": "mid"},
    {"id": 2, "kind": "b", "zone": "line_2", "title": "Lamp", "notes": "pump room", "value": 20, "at": _ms("2025-03-02T23:59:00Z"), "level": "high"},
    {"id": 3, "kind": "a", "zone": "office", "title": "Chiller", "value": 100, "at": _ms("2025-03-03T00:00:00Z"), "level": "low"},
    {"id": 4, "kind": "c", "title": "No zone", "level": "mid"},
    {"id": 5, "kind": "a", "zone": "line_1", "title": "Second pump", "value": 150, "at": _ms("2025-03-01T12:00:00Z"), "level": "mid"},
)


def _ids(records) -> list[object]:
    return [record["id"] for record in records]


@pytest.mark.parametrize("inactive", [None, "", "all"])
def test_inactive_values_do_not_filter(inactive: object) -> None:
    assert _ids(_engine().apply_filters(_RECORDS, {"kind": inactive, "search": inactive})) == [1, 2, 3, 4, 5]


def test_exact_and_contains_match() -> None:
    engine = _engine()
    assert _ids(engine.apply_filters(_RECORDS, {"kind": "a"})) == [1, 3, 5]
    assert _ids(engine.apply_filters(_RECORDS, {"zone": "line"})) == [1, 2, 5]


def test_search_is_case_insensitive_across_fields() -> None:
    assert _ids(_engine().apply_filters(_RECORDS, {"search": "PUMP"})) == [1, 2, 5]


def test_numeric_thresholds_accept_text_and_exclude_missing() -> None:
    engine = _engine()
    assert _ids(engine.apply_filters(_RECORDS, {"min_value": "100"})) == [1, 3, 5]
    assert _ids(engine.apply_filters(_RECORDS, {"maxValue": 100})) == [2, 3]


def test_non_numeric_threshold_is_rejected() -> None:
    with pytest.raises(ValueError, match="min_value must be numeric"):
        _engine().apply_filters(_RECORDS, {"min_value": "lots"})


def test_date_range_is_inclusive_and_open_ended() -> None:
    engine = _engine()
    window = DateRange(start_ms=_ms("2025-03-01T12:00:00Z"), end_ms=_ms("2025-03-03T00:00:00Z"))

    assert _ids(engine.apply_filters(_RECORDS, {"window": window})) == [2, 3, 5]
    assert _ids(engine.apply_filters(_RECORDS, {"window": {"start": "2025-03-02"}})) == [2, 3]
    assert _ids(engine.apply_filters(_RECORDS, {"window": {"start": "", "end": ""}})) == [1, 2, 3, 4, 5]


def test_date_only_end_covers_whole_day() -> None:
    filtered = _engine().apply_filters(_RECORDS, {"window": {"end": "2025-03-02"}})
    assert _ids(filtered) == [1, 2, 5]


def test_date_range_rejects_inverted_bounds() -> None:
    with pytest.raises(ValueError, match="start_ms must be <= end_ms"):
        DateRange(start_ms=10, end_ms=5)


def test_quick_filter_selects_and_unknown_name_is_inactive() -> None:
    engine = _engine()
    assert _ids(engine.apply_filters(_RECORDS, {"preset": "big"})) == [1, 3, 5]
    assert _ids(engine.apply_filters(_RECORDS, {"preset": "tiny"})) == [1, 2, 3, 4, 5]


def test_criteria_must_be_mapping() -> None:
    with pytest.raises(TypeError, match="criteria must be a mapping"):
        _engine().apply_filters(_RECORDS, [("kind", "a")])  # type: ignore[arg-type]


def test_filter_is_idempotent() -> None:
    engine = _engine()
    criteria = {"kind": "a", "search": "pump", "preset": "big"}
    once = engine.apply_filters(_RECORDS, criteria)

    assert engine.apply_filters(once, criteria) == once


def test_criteria_compose_with_and() -> None:
    engine = _engine()
    first = {"kind": "a", "window": {"start": "2025-03-01T11:00:00Z"}}
    second = {"min_value": 120, "search": "pump"}

    combined = engine.apply_filters(_RECORDS, {**first, **second})
    assert combined == engine.apply_filters(engine.apply_filters(_RECORDS, first), second)
    assert _ids(combined) == [5]


def test_sort_is_stable_for_equal_keys() -> None:
    engine = _engine()
    assert _ids(engine.sort(_RECORDS, "value")) == [1, 5, 3, 2, 4]
    assert _ids(engine.sort(_RECORDS, SortSpec("value", descending=False))) == [2, 3, 1, 5, 4]


def test_missing_sort_values_rank_lowest() -> None:
    engine = _engine()
    assert _ids(engine.sort(_RECORDS, SortSpec("at"))) == [3, 2, 5, 1, 4]
    assert _ids(engine.sort(_RECORDS, SortSpec("at", descending=False))) == [4, 1, 5, 2, 3]


def test_rank_and_text_sorts() -> None:
    engine = _engine()
    assert _ids(engine.sort(_RECORDS, "level")) == [2, 1, 4, 5, 3]
    assert _ids(engine.sort(_RECORDS, "title")) == [3, 2, 4, 1, 5]


def test_unknown_sort_key_is_rejected() -> None:
    with pytest.raises(ValueError, match="unknown sort key"):
        _engine().sort(_RECORDS, "color")


def test_engine_rejects_duplicate_keys() -> None:
    with pytest.raises(ValueError, match="duplicate criteria key"):
        RecordFilterSortEngine(
            (
                FilterField("status", PredicateKind.EXACT),
                FilterField("state", PredicateKind.EXACT, attributes=("status",), aliases=("status",)),
            )
        )


def test_empty_records_give_empty_result() -> None:
    assert _engine().apply((), {"kind": "a"}, "value") == ()


def test_integer_timestamps_are_taken_as_epoch_ms() -> None:
    engine = _engine()
    records = (
        {"id": "early", "at": 1_500},
        {"id": "older", "at": 90_000_000_000},
        {"id": "newer", "at": 110_000_000_000},
    )

    assert _ids(engine.apply_filters(records, {"window": DateRange(start_ms=1_000, end_ms=2_000)})) == ["early"]
    assert _ids(engine.apply_filters(records, {"window": (1_000, 2_000)})) == ["early"]
    assert _ids(engine.sort(records, "at")) == ["newer", "older", "early"]
