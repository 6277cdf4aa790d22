"""Alert list filtering, ordering and tab counters."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from factoryenergy.domain.models import AlertRecord, AlertSeverity, AlertStatus
from factoryenergy.filtering.engine import (
    FilterField,
    PredicateKind,
    RecordFilterSortEngine,
    SortField,
    SortKind,
    SortSpec,
    read_field,
)


SEVERITY_RANK: dict[str, int] = {
    AlertSeverity.CRITICAL.value: 5,
    AlertSeverity.HIGH.value: 4,
    AlertSeverity.MEDIUM.value: 3,
    AlertSeverity.LOW.value: 2,
    AlertSeverity.INFO.value: 1,
}

WARNING_SEVERITIES = frozenset({AlertSeverity.HIGH.value, AlertSeverity.MEDIUM.value})
INFO_SEVERITIES = frozenset({AlertSeverity.LOW.value, AlertSeverity.INFO.value})

DEFAULT_ALERT_SORT = SortSpec(key="timestamp", descending=True)


def _severity_in(record: object, severities: frozenset[str]) -> bool:
    severity = read_field(record, "severity")
    return severity is not None and str(severity) in severities


ALERT_TABS = {
    "critical": lambda record: _severity_in(record, frozenset({AlertSeverity.CRITICAL.value})),
    "warnings": lambda record: _severity_in(record, WARNING_SEVERITIES),
    "info": lambda record: _severity_in(record, INFO_SEVERITIES),
    "new": lambda record: str(read_field(record, "status")) == AlertStatus.NEW.value,
}

ALERT_ENGINE: RecordFilterSortEngine[AlertRecord] = RecordFilterSortEngine(
    (
        FilterField("tab", PredicateKind.QUICK, aliases=("activeTab",)),
        FilterField("search", PredicateKind.SEARCH, attributes=("title", "description", "location")),
        FilterField("severity", PredicateKind.EXACT),
        FilterField("status", PredicateKind.EXACT),
        FilterField("category", PredicateKind.EXACT),
        FilterField("location", PredicateKind.CONTAINS),
        FilterField("machine_id", PredicateKind.EXACT, aliases=("machineId",)),
        FilterField(
            "date_range",
            PredicateKind.DATE_RANGE,
            attributes=("timestamp_ms",),
            aliases=("dateRange",),
        ),
    ),
    quick_filters=ALERT_TABS,
    sort_fields=(
        SortField("timestamp", "timestamp_ms", kind=SortKind.TIMESTAMP, aliases=("timestamp_ms",)),
        SortField("severity", "severity", kind=SortKind.RANK, rank=SEVERITY_RANK),
        SortField("title", "title", kind=SortKind.TEXT, descending=False),
    ),
)


@dataclass(frozen=True, slots=True)
class AlertCounts:
    """Alert totals shown on the alert tabs."""

    total: int
    critical: int
    warnings: int
    info: int
    new: int


def apply_alert_filters(
    alerts: Sequence[AlertRecord],
    criteria: Mapping[str, object],
    *,
    sort: SortSpec | str | None = DEFAULT_ALERT_SORT,
) -> tuple[AlertRecord, ...]:
    """Filter alerts by tab, search term, classification and date range; newest first."""
    return ALERT_ENGINE.apply(alerts, criteria, sort)


def count_alerts(alerts: Sequence[AlertRecord]) -> AlertCounts:
    return AlertCounts(
        total=len(alerts),
        critical=sum(1 for alert in alerts if ALERT_TABS["critical"](alert)),
        warnings=sum(1 for alert in alerts if ALERT_TABS["warnings"](alert)),
        info=sum(1 for alert in alerts if ALERT_TABS["info"](alert)),
        new=sum(1 for alert in alerts if ALERT_TABS["new"](alert)),
    )
