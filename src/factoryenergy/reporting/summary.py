"""JSON-ready dashboard summary."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from typing import Any

from factoryenergy.analytics import (
    CostBucket,
    EnergyMetrics,
    MachineMetrics,
    MetricsForecaster,
    compute_cost_distribution,
    compute_metrics,
    project_machine_metrics,
)
from factoryenergy.filtering import AlertCounts, count_alerts
from factoryenergy.integration import DashboardSnapshot


@dataclass(frozen=True, slots=True)
class DashboardSummary:
    """Derived views for one snapshot."""

    created_at_utc: str
    metrics: EnergyMetrics
    cost_distribution: tuple[CostBucket, ...]
    alert_counts: AlertCounts
    machines: tuple[MachineMetrics, ...]

    @staticmethod
    def now_timestamp() -> str:
        """ISO-8601 UTC timestamp helper."""
        return datetime.now(UTC).isoformat()


def build_dashboard_summary(
    snapshot: DashboardSnapshot,
    *,
    machine_ids: Sequence[str] | None = None,
    forecaster: MetricsForecaster | None = None,
    created_at_utc: str | None = None,
) -> DashboardSummary:
    """Compute every dashboard view; ``machine_ids`` defaults to the whole roster."""
    selected = tuple(machine_ids) if machine_ids else tuple(machine.id for machine in snapshot.machines)
    return DashboardSummary(
        created_at_utc=created_at_utc or DashboardSummary.now_timestamp(),
        metrics=compute_metrics(snapshot.readings, snapshot.machines, forecaster=forecaster),
        cost_distribution=compute_cost_distribution(snapshot.readings, snapshot.machines),
        alert_counts=count_alerts(snapshot.alerts),
        machines=tuple(project_machine_metrics(snapshot.readings, machine_id) for machine_id in selected),
    )


def summary_to_jsonable(summary: DashboardSummary) -> dict[str, Any]:
    """Serialize a summary into JSON-safe structure."""
    return asdict(summary)
