"""Tabular CSV export of the dashboard state."""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from datetime import datetime, timezone

from factoryenergy.analytics import EnergyMetrics
from factoryenergy.domain.models import AlertSeverity
from factoryenergy.filtering import apply_alert_filters
from factoryenergy.integration import DashboardSnapshot


RECENT_READINGS = 20
RECENT_ALERTS = 25

MACHINE_STATUS_LABELS = {
    "operational": "Operational",
    "alert": "Alert",
    "maintenance": "Maintenance",
    "inactive": "Inactive",
}

SEVERITY_CODES = {
    AlertSeverity.CRITICAL.value: "CRITICAL",
    AlertSeverity.HIGH.value: "WARNING",
    AlertSeverity.MEDIUM.value: "WARNING",
    AlertSeverity.LOW.value: "INFORMATION",
    AlertSeverity.INFO.value: "INFORMATION",
}


@dataclass(frozen=True, slots=True)
class ReportThresholds:
    """Limits used to label exported metric values."""

    high_consumption_kwh: float = 100.0
    high_daily_cost_mad: float = 1000.0
    excellent_efficiency: float = 80.0
    high_co2_kg: float = 50.0
    estimated_cost_per_kwh: float = 1.2

    def __post_init__(self) -> None:
        for name in (
            "high_consumption_kwh",
            "high_daily_cost_mad",
            "excellent_efficiency",
            "high_co2_kg",
            "estimated_cost_per_kwh",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0")


def export_dashboard_csv(
    snapshot: DashboardSnapshot,
    metrics: EnergyMetrics,
    *,
    exported_at_ms: int,
    thresholds: ReportThresholds | None = None,
) -> str:
    """Render metrics, machines, recent readings and recent alerts as CSV sections."""
    limits = thresholds or ReportThresholds()
    exported_at = _iso(exported_at_ms)
    machine_names = {machine.id: machine.name for machine in snapshot.machines}

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")

    writer.writerow(["GENERAL_METRICS"])
    writer.writerow(["Type", "Value", "Unit", "Status", "Measured_At"])
    writer.writerow([
        "Total_Consumption",
        f"{metrics.current_consumption:.2f}",
        "kWh",
        "High" if metrics.current_consumption > limits.high_consumption_kwh else "Normal",
        exported_at,
    ])
    writer.writerow([
        "Daily_Cost",
        f"{metrics.daily_cost:.2f}",
        "MAD",
        "High" if metrics.daily_cost > limits.high_daily_cost_mad else "Acceptable",
        exported_at,
    ])
    writer.writerow([
        "Overall_Efficiency",
        f"{metrics.efficiency:.1f}",
        "%",
        "Excellent" if metrics.efficiency > limits.excellent_efficiency else "Average",
        exported_at,
    ])
    writer.writerow([
        "CO2_Footprint",
        f"{metrics.co2_footprint:.2f}",
        "kg",
        "High" if metrics.co2_footprint > limits.high_co2_kg else "Acceptable",
        exported_at,
    ])
    writer.writerow([])

    writer.writerow(["MACHINE_DETAIL"])
    writer.writerow([
        "Machine_ID",
        "Machine_Name",
        "Status",
        "Power_kW",
        "Efficiency_Pct",
        "Temperature_C",
        "Last_Maintenance",
        "Alert_Message",
        "Data_Source",
    ])
    for machine in snapshot.machines:
        writer.writerow([
            machine.id,
            machine.name,
            MACHINE_STATUS_LABELS.get(machine.status, "Unknown"),
            _number(machine.current_power_kw),
            _number(machine.efficiency),
            _number(machine.temperature_c),
            "" if machine.last_maintenance_ms is None else _iso(machine.last_maintenance_ms)[:10],
            machine.alert_message or "",
            machine.generated_by or "Manual",
        ])
    writer.writerow([])

    writer.writerow(["ENERGY_HISTORY"])
    writer.writerow([
        "Timestamp",
        "Machine_ID",
        "Machine_Name",
        "Consumption_kWh",
        "Voltage_V",
        "Current_A",
        "Power_Factor",
        "Estimated_Cost_MAD",
        "Period",
    ])
    for reading in snapshot.readings[-RECENT_READINGS:]:
        writer.writerow([
            _iso(reading.timestamp_ms),
            reading.machine_id,
            machine_names.get(reading.machine_id, "Unknown"),
            _number(reading.power_usage_kw),
            _number(reading.voltage),
            _number(reading.current),
            _number(1.0 if reading.power_factor is None else reading.power_factor),
            f"{reading.power_usage_kw * limits.estimated_cost_per_kwh:.2f}",
            period_of_day(reading.timestamp_ms),
        ])
    writer.writerow([])

    writer.writerow(["SYSTEM_ALERTS"])
    writer.writerow([
        "Alert_ID",
        "Severity",
        "Title",
        "Description",
        "Machine_ID",
        "Machine_Name",
        "Recommended_Action",
        "Date",
        "Time",
        "Source",
    ])
    for alert in apply_alert_filters(snapshot.alerts, {})[:RECENT_ALERTS]:
        timestamp = "" if alert.timestamp_ms is None else _iso(alert.timestamp_ms)
        writer.writerow([
            alert.id,
            SEVERITY_CODES.get(str(alert.severity), "NORMAL"),
            alert.title or "",
            alert.description or "",
            alert.machine_id or "",
            machine_names.get(alert.machine_id or "", alert.machine_id or ""),
            alert.action or "None",
            timestamp[:10],
            timestamp[11:19],
            alert.generated_by or "Manual",
        ])

    return buffer.getvalue()


def period_of_day(timestamp_ms: int) -> str:
    """Label the UTC hour of ``timestamp_ms`` as a shift period."""
    hour = datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc).hour
    if 6 <= hour < 12:
        return "MORNING"
    if 12 <= hour < 18:
        return "AFTERNOON"
    if 18 <= hour < 22:
        return "EVENING"
    return "NIGHT"


def _iso(timestamp_ms: int) -> str:
    moment = datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def _number(value: float | None) -> str:
    if value is None:
        return "0"
    return f"{value:g}"
