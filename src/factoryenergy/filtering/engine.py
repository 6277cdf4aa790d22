"""Generic multi-predicate filtering and stable sorting of domain records.

One engine instance is declared per record domain (alerts, recommendations,
machines) with the criteria keys it understands. Criteria are plain mappings,
as produced by dashboard filter panels; every active entry must hold for a
record to be kept. A record lacking a field referenced by a criterion fails
that criterion, and a record lacking a sort field ranks below every record
that has it. Neither case raises. Integer timestamps on records are epoch
milliseconds; other timestamp forms are parsed.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from math import isfinite
from typing import Any, Generic, TypeVar

from factoryenergy.domain.timestamps import end_of_day_ms, is_date_only, parse_timestamp_ms


RecordT = TypeVar("RecordT")
QuickFilter = Callable[[Any], bool]

INACTIVE_VALUES: tuple[object, ...] = (None, "", "all")


class PredicateKind(StrEnum):
    """Supported criterion semantics."""

    EXACT = "exact"
    CONTAINS = "contains"
    SEARCH = "search"
    MIN = "min"
    MAX = "max"
    DATE_RANGE = "date_range"
    QUICK = "quick"


class SortKind(StrEnum):
    """How sort values are compared."""

    NUMERIC = "numeric"
    TEXT = "text"
    TIMESTAMP = "timestamp"
    RANK = "rank"


@dataclass(frozen=True, slots=True)
class FilterField:
    """One criterion key and the record attributes it is evaluated against."""

    key: str
    kind: PredicateKind
    attributes: tuple[str, ...] = ()
    aliases: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.key.strip():
            raise ValueError("key is required")
        if self.kind == PredicateKind.QUICK:
            return
        if len(self.target_attributes) == 0:
            raise ValueError(f"{self.key} must target at least one attribute")
        if self.kind != PredicateKind.SEARCH and len(self.target_attributes) != 1:
            raise ValueError(f"{self.key} ({self.kind.value}) must target exactly one attribute")

    @property
    def target_attributes(self) -> tuple[str, ...]:
        return self.attributes or (self.key,)


@dataclass(frozen=True, slots=True)
class SortField:
    """Sortable attribute with its comparison kind and default direction."""

    key: str
    attribute: str
    kind: SortKind = SortKind.NUMERIC
    descending: bool = True
    rank: Mapping[str, int] = field(default_factory=dict)
    aliases: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.kind == SortKind.RANK and not self.rank:
            raise ValueError(f"{self.key} rank table must not be empty")


@dataclass(frozen=True, slots=True)
class SortSpec:
    """Requested ordering; ``descending=None`` keeps the field default."""

    key: str
    descending: bool | None = None


@dataclass(frozen=True, slots=True)
class DateRange:
    """Inclusive epoch-millisecond interval, open on an omitted side."""

    start_ms: int | None = None
    end_ms: int | None = None

    def __post_init__(self) -> None:
        if self.start_ms is not None and self.end_ms is not None and self.start_ms > self.end_ms:
            raise ValueError("start_ms must be <= end_ms")

    @property
    def is_bounded(self) -> bool:
        return self.start_ms is not None or self.end_ms is not None

    def contains(self, timestamp_ms: int) -> bool:
        if self.start_ms is not None and timestamp_ms < self.start_ms:
            return False
        if self.end_ms is not None and timestamp_ms > self.end_ms:
            return False
        return True

    @classmethod
    def from_bounds(cls, start: object | None = None, end: object | None = None) -> DateRange:
        """Build from loose bounds; a calendar-date ``end`` covers that whole day."""
        start_ms = None if start in INACTIVE_VALUES else epoch_ms(start, field_name="start")
        end_ms = None
        if end not in INACTIVE_VALUES:
            end_ms = epoch_ms(end, field_name="end")
            if is_date_only(end):
                end_ms = end_of_day_ms(end_ms)
        return cls(start_ms=start_ms, end_ms=end_ms)


class RecordFilterSortEngine(Generic[RecordT]):
    """Apply AND-composed criteria and a stable sort to a record collection."""

    def __init__(
        self,
        fields: Sequence[FilterField],
        *,
        quick_filters: Mapping[str, QuickFilter] | None = None,
        sort_fields: Sequence[SortField] = (),
    ) -> None:
        self._fields = tuple(fields)
        self._quick_filters = dict(quick_filters or {})
        self._sort_fields: dict[str, SortField] = {}

        keys: set[str] = set()
        for filter_field in self._fields:
            for key in (filter_field.key, *filter_field.aliases):
                if key in keys:
                    raise ValueError(f"duplicate criteria key: {key}")
                keys.add(key)
            if filter_field.kind == PredicateKind.QUICK and not self._quick_filters:
                raise ValueError(f"{filter_field.key} requires quick_filters")
        for sort_field in sort_fields:
            for key in (sort_field.key, *sort_field.aliases):
                if key in self._sort_fields:
                    raise ValueError(f"duplicate sort key: {key}")
                self._sort_fields[key] = sort_field

    @property
    def quick_filter_names(self) -> tuple[str, ...]:
        return tuple(self._quick_filters)

    @property
    def sort_keys(self) -> tuple[str, ...]:
        return tuple(self._sort_fields)

    def apply_filters(
        self,
        records: Sequence[RecordT],
        criteria: Mapping[str, object],
    ) -> tuple[RecordT, ...]:
        """Return records satisfying every active criterion, in input order."""
        if isinstance(records, (str, bytes)) or not isinstance(records, Sequence):
            raise TypeError("records must be a sequence")
        predicates = self._compile(criteria)
        if not predicates:
            return tuple(records)
        return tuple(record for record in records if all(predicate(record) for predicate in predicates))

    def sort(self, records: Sequence[RecordT], spec: SortSpec | str | None) -> tuple[RecordT, ...]:
        """Stable sort where a missing sort value is the lowest rank.

        Records without the value come last when descending and first when
        ascending, keeping their input order among themselves.
        """
        if spec is None or spec in INACTIVE_VALUES:
            return tuple(records)
        if isinstance(spec, str):
            spec = SortSpec(key=spec)
        sort_field = self._sort_fields.get(spec.key)
        if sort_field is None:
            raise ValueError(f"unknown sort key: {spec.key!r}")
        descending = sort_field.descending if spec.descending is None else spec.descending

        present: list[tuple[object, RecordT]] = []
        missing: list[RecordT] = []
        for record in records:
            value = _sort_value(read_field(record, sort_field.attribute), sort_field)
            if value is None:
                missing.append(record)
            else:
                present.append((value, record))

        # sorted() keeps equal keys in input order for reverse=True as well.
        ordered = tuple(record for _, record in sorted(present, key=lambda item: item[0], reverse=descending))
        return ordered + tuple(missing) if descending else tuple(missing) + ordered

    def apply(
        self,
        records: Sequence[RecordT],
        criteria: Mapping[str, object],
        sort: SortSpec | str | None = None,
    ) -> tuple[RecordT, ...]:
        return self.sort(self.apply_filters(records, criteria), sort)

    def _compile(self, criteria: Mapping[str, object]) -> list[Callable[[RecordT], bool]]:
        if not isinstance(criteria, Mapping):
            raise TypeError("criteria must be a mapping")

        predicates: list[Callable[[RecordT], bool]] = []
        for filter_field in self._fields:
            raw = _pick(criteria, filter_field.key, *filter_field.aliases)
            predicate = self._predicate_for(filter_field, raw)
            if predicate is not None:
                predicates.append(predicate)
        return predicates

    def _predicate_for(
        self,
        filter_field: FilterField,
        raw: object | None,
    ) -> Callable[[RecordT], bool] | None:
        kind = filter_field.kind
        if kind == PredicateKind.DATE_RANGE:
            date_range = _coerce_date_range(raw, field_name=filter_field.key)
            if date_range is None:
                return None
            attribute = filter_field.target_attributes[0]
            return lambda record: _in_date_range(read_field(record, attribute), date_range)

        if raw in INACTIVE_VALUES:
            return None

        if kind == PredicateKind.QUICK:
            # Names without a registered predicate leave the list unfiltered.
            return self._quick_filters.get(str(raw))

        attributes = filter_field.target_attributes
        if kind == PredicateKind.EXACT:
            return lambda record: _equals(read_field(record, attributes[0]), raw)
        if kind == PredicateKind.CONTAINS:
            needle = str(raw)
            return lambda record: _contains(read_field(record, attributes[0]), needle)
        if kind == PredicateKind.SEARCH:
            term = str(raw).lower()
            return lambda record: any(
                _contains(_lower_or_none(read_field(record, attribute)), term) for attribute in attributes
            )

        threshold = _coerce_threshold(raw, field_name=filter_field.key)
        if kind == PredicateKind.MIN:
            return lambda record: _compare(read_field(record, attributes[0]), threshold, minimum=True)
        return lambda record: _compare(read_field(record, attributes[0]), threshold, minimum=False)


def read_field(record: object, attribute: str) -> object | None:
    """Read an attribute from a dataclass-like record or a mapping."""
    if isinstance(record, Mapping):
        return record.get(attribute)
    return getattr(record, attribute, None)


def numeric_field(record: object, attribute: str) -> float | None:
    """Return a finite numeric attribute value, or None when absent or non-numeric."""
    return _as_number(read_field(record, attribute))


def _pick(payload: Mapping[str, object], *keys: str) -> object | None:
    for key in keys:
        if key in payload:
            return payload[key]
    return None


def _equals(value: object | None, expected: object) -> bool:
    if value is None:
        return False
    if value == expected:
        return True
    return str(value) == str(expected)


def _contains(value: object | None, needle: str) -> bool:
    return isinstance(value, str) and needle in value


def _lower_or_none(value: object | None) -> str | None:
    return value.lower() if isinstance(value, str) else None


def _as_number(value: object | None) -> float | None:
    if value is None or isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    number = float(value)
    return number if isfinite(number) else None


def _compare(value: object | None, threshold: float, *, minimum: bool) -> bool:
    number = _as_number(value)
    if number is None:
        return False
    return number >= threshold if minimum else number <= threshold


def _coerce_threshold(raw: object, *, field_name: str) -> float:
    if isinstance(raw, bool):
        raise ValueError(f"{field_name} must be numeric")
    if isinstance(raw, (int, float)):
        value = float(raw)
    elif isinstance(raw, str):
        try:
            value = float(raw.strip())
        except ValueError as exc:
            raise ValueError(f"{field_name} must be numeric") from exc
    else:
        raise ValueError(f"{field_name} must be numeric")
    if not isfinite(value):
        raise ValueError(f"{field_name} must be finite")
    return value


def _coerce_date_range(raw: object | None, *, field_name: str) -> DateRange | None:
    if raw in INACTIVE_VALUES:
        return None
    if isinstance(raw, DateRange):
        date_range = raw
    elif isinstance(raw, Mapping):
        date_range = DateRange.from_bounds(_pick(raw, "start", "from"), _pick(raw, "end", "to"))
    elif isinstance(raw, (tuple, list)) and len(raw) == 2:
        date_range = DateRange.from_bounds(raw[0], raw[1])
    else:
        raise ValueError(f"{field_name} must be a DateRange, a start/end mapping or a pair")
    return date_range if date_range.is_bounded else None


def epoch_ms(raw: object, *, field_name: str) -> int:
    """Return integers unchanged as epoch ms; parse text, floats and datetimes."""
    if isinstance(raw, int) and not isinstance(raw, bool):
        return raw
    return parse_timestamp_ms(raw, field_name=field_name)


def _timestamp_or_none(value: object | None) -> int | None:
    if value is None:
        return None
    try:
        return epoch_ms(value, field_name="timestamp")
    except ValueError:
        return None


def _in_date_range(value: object | None, date_range: DateRange) -> bool:
    timestamp_ms = _timestamp_or_none(value)
    if timestamp_ms is None:
        return False
    return date_range.contains(timestamp_ms)


def _sort_value(value: object | None, sort_field: SortField) -> object | None:
    if value is None:
        return None
    if sort_field.kind == SortKind.NUMERIC:
        return _as_number(value)
    if sort_field.kind == SortKind.TIMESTAMP:
        return _timestamp_or_none(value)
    if sort_field.kind == SortKind.RANK:
        return sort_field.rank.get(str(value))
    return str(value).lower()
