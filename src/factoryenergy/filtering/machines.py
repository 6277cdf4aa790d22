"""Machine roster filtering for the monitoring grid."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from factoryenergy.domain.models import Machine
from factoryenergy.filtering.engine import FilterField, PredicateKind, RecordFilterSortEngine, numeric_field


def _efficiency_between(record: object, lower: float | None, upper: float | None) -> bool:
    efficiency = numeric_field(record, "efficiency")
    if efficiency is None:
        return False
    if lower is not None and efficiency < lower:
        return False
    return upper is None or efficiency < upper


MACHINE_EFFICIENCY_BANDS = {
    "high": lambda record: _efficiency_between(record, 80.0, None),
    "medium": lambda record: _efficiency_between(record, 60.0, 80.0),
    "low": lambda record: _efficiency_between(record, None, 60.0),
}

MACHINE_ENGINE: RecordFilterSortEngine[Machine] = RecordFilterSortEngine(
    (
        FilterField("search", PredicateKind.SEARCH, attributes=("name",)),
        FilterField("department", PredicateKind.EXACT),
        FilterField("type", PredicateKind.EXACT),
        FilterField("status", PredicateKind.EXACT),
        FilterField("efficiency", PredicateKind.QUICK),
    ),
    quick_filters=MACHINE_EFFICIENCY_BANDS,
)


def apply_machine_filters(machines: Sequence[Machine], criteria: Mapping[str, object]) -> tuple[Machine, ...]:
    return MACHINE_ENGINE.apply_filters(machines, criteria)
