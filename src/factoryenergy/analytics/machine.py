"""Single-machine consumption and efficiency projection."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone

from factoryenergy.analytics.reductions import require_sequence, rounded_mean_field, sum_field
from factoryenergy.domain.models import EnergyReading


@dataclass(frozen=True, slots=True)
class HourlyConsumption:
    """Consumption of one reading labelled with its UTC hour, e.g. ``"07h"``."""

    hour: str
    consumption: float


@dataclass(frozen=True, slots=True)
class EfficiencyBand:
    """Histogram bucket over efficiency scores, ``lower <= score < upper``."""

    name: str
    lower: float
    upper: float | None
    count: int


@dataclass(frozen=True, slots=True)
class MachineMetrics:
    """Per-machine summary used by the machine detail view."""

    machine_id: str
    total_consumption: float
    total_cost: float
    average_efficiency: int
    operating_hours: int
    hourly_data: tuple[HourlyConsumption, ...]
    efficiency_distribution: tuple[EfficiencyBand, ...]


# (name, lower inclusive, upper exclusive); the top band is closed at 100.
EFFICIENCY_BANDS: tuple[tuple[str, float, float | None], ...] = (
    ("Excellent (90-100%)", 90.0, None),
    ("Good (80-89%)", 80.0, 90.0),
    ("Average (70-79%)", 70.0, 80.0),
    ("Poor (60-69%)", 60.0, 70.0),
    ("Critical (<60%)", float("-inf"), 60.0),
)


def project_machine_metrics(readings: Sequence[EnergyReading], machine_id: str) -> MachineMetrics:
    """Summarize the readings belonging to ``machine_id``."""
    require_sequence(readings, name="readings")
    machine_readings = [reading for reading in readings if reading.machine_id == machine_id]

    return MachineMetrics(
        machine_id=machine_id,
        total_consumption=sum_field(machine_readings, "power_usage_kw"),
        total_cost=sum_field(machine_readings, "cost_mad"),
        average_efficiency=rounded_mean_field(machine_readings, "efficiency_score"),
        operating_hours=len(machine_readings),
        hourly_data=tuple(
            HourlyConsumption(
                hour=format_reading_hour(reading.timestamp_ms),
                consumption=float(reading.power_usage_kw or 0.0),
            )
            for reading in machine_readings
        ),
        efficiency_distribution=efficiency_distribution(machine_readings),
    )


def efficiency_distribution(readings: Sequence[EnergyReading]) -> tuple[EfficiencyBand, ...]:
    """Count readings per efficiency band, best band first."""
    counts = [0 for _ in EFFICIENCY_BANDS]
    for reading in readings:
        score = reading.efficiency_score or 0.0
        for idx, (_, lower, upper) in enumerate(EFFICIENCY_BANDS):
            if score >= lower and (upper is None or score < upper):
                counts[idx] += 1
                break

    return tuple(
        EfficiencyBand(name=name, lower=max(lower, 0.0), upper=upper, count=count)
        for (name, lower, upper), count in zip(EFFICIENCY_BANDS, counts)
    )


def format_reading_hour(timestamp_ms: int) -> str:
    hour = datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc).hour
    return f"{hour:02d}h"
