"""Tests for alert filtering, ordering and counters."""

from __future__ import annotations

from factoryenergy.domain import AlertRecord, AlertSeverity, AlertStatus
from factoryenergy.domain.timestamps import parse_timestamp_ms
from factoryenergy.filtering import DateRange, SortSpec, apply_alert_filters, count_alerts


def _alert(
    alert_id: str,
    severity: AlertSeverity | None,
    status: AlertStatus | None,
    at: str | None,
    *,
    title: str = "Alert",
    location: str | None = "production_line_1",
    category: str | None = "energy",
) -> AlertRecord:
    return AlertRecord(
        id=alert_id,
        title=title,
        description=f"{title} details",
        severity=severity,
        status=status,
        category=category,
        location=location,
        timestamp_ms=None if at is None else parse_timestamp_ms(at, field_name="at"),
    )


_ALERTS = (
    _alert("A1", AlertSeverity.CRITICAL, AlertStatus.NEW, "2025-03-14T09:00:00Z", title="Compressor overload"),
    _alert("A2", AlertSeverity.LOW, AlertStatus.RESOLVED, "2025-03-13T09:00:00Z", location="warehouse"),
    _alert("A3", AlertSeverity.MEDIUM, AlertStatus.NEW, "2025-03-15T09:00:00Z", category="maintenance"),
    _alert("A4", AlertSeverity.HIGH, AlertStatus.ACKNOWLEDGED, None, location=None),
    _alert("A5", AlertSeverity.INFO, AlertStatus.CLOSED, "2025-03-10T09:00:00Z", location="office"),
)


def _ids(alerts) -> list[str]:
    return [alert.id for alert in alerts]


def test_severity_filter_keeps_matching_alert() -> None:
    alerts = (
        _alert("A1", AlertSeverity.CRITICAL, AlertStatus.NEW, "2025-03-14T09:00:00Z"),
        _alert("A2", AlertSeverity.LOW, AlertStatus.RESOLVED, "2025-03-15T09:00:00Z"),
    )
    assert _ids(apply_alert_filters(alerts, {"severity": "critical"})) == ["A1"]


def test_default_order_is_newest_first_with_undated_last() -> None:
    assert _ids(apply_alert_filters(_ALERTS, {})) == ["A3", "A1", "A2", "A5", "A4"]


def test_tabs_group_severities() -> None:
    assert _ids(apply_alert_filters(_ALERTS, {"tab": "critical"})) == ["A1"]
    assert _ids(apply_alert_filters(_ALERTS, {"tab": "warnings"})) == ["A3", "A4"]
    assert _ids(apply_alert_filters(_ALERTS, {"activeTab": "info"})) == ["A2", "A5"]
    assert _ids(apply_alert_filters(_ALERTS, {"tab": "new"})) == ["A3", "A1"]
    assert len(apply_alert_filters(_ALERTS, {"tab": "all"})) == len(_ALERTS)


def test_location_matches_substring_and_skips_missing() -> None:
    assert _ids(apply_alert_filters(_ALERTS, {"location": "production"})) == ["A3", "A1"]


def test_search_matches_title_description_and_location() -> None:
    assert _ids(apply_alert_filters(_ALERTS, {"search": "compressor"})) == ["A1"]
    assert _ids(apply_alert_filters(_ALERTS, {"search": "WAREHOUSE"})) == ["A2"]


def test_combined_criteria_and_date_range() -> None:
    criteria = {
        "status": "new",
        "category": "all",
        "dateRange": {"start": "2025-03-14", "end": "2025-03-14"},
    }
    assert _ids(apply_alert_filters(_ALERTS, criteria)) == ["A1"]


def test_severity_sort_uses_rank() -> None:
    assert _ids(apply_alert_filters(_ALERTS, {}, sort=SortSpec("severity"))) == ["A1", "A4", "A3", "A2", "A5"]
    assert _ids(apply_alert_filters(_ALERTS, {}, sort=SortSpec("severity", descending=False))) == [
        "A5",
        "A2",
        "A3",
        "A4",
        "A1",
    ]


def test_count_alerts() -> None:
    counts = count_alerts(_ALERTS)

    assert counts.total == 5
    assert counts.critical == 1
    assert counts.warnings == 2
    assert counts.info == 2
    assert counts.new == 2


def test_empty_alerts() -> None:
    assert apply_alert_filters((), {"severity": "critical"}) == ()
    assert count_alerts(()).total == 0


def test_small_millisecond_timestamps_filter_and_sort_as_milliseconds() -> None:
    alerts = (
        AlertRecord(id="A1", timestamp_ms=1_500),
        AlertRecord(id="older", timestamp_ms=90_000_000_000),
        AlertRecord(id="newer", timestamp_ms=110_000_000_000),
    )

    assert _ids(apply_alert_filters(alerts, {"date_range": DateRange(start_ms=1_000, end_ms=2_000)})) == ["A1"]
    assert _ids(apply_alert_filters(alerts, {})) == ["newer", "older", "A1"]
