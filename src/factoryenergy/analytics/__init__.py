"""Aggregations over energy readings and the machine roster."""

from factoryenergy.analytics.cost import COST_CATEGORIES, CostBucket, CostCategory, compute_cost_distribution
from factoryenergy.analytics.machine import (
    EFFICIENCY_BANDS,
    EfficiencyBand,
    HourlyConsumption,
    MachineMetrics,
    efficiency_distribution,
    project_machine_metrics,
)
from factoryenergy.analytics.metrics import EnergyMetrics, MetricsForecast, MetricsForecaster, compute_metrics

__all__ = [
    "COST_CATEGORIES",
    "CostBucket",
    "CostCategory",
    "EFFICIENCY_BANDS",
    "EfficiencyBand",
    "EnergyMetrics",
    "HourlyConsumption",
    "MachineMetrics",
    "MetricsForecast",
    "MetricsForecaster",
    "compute_cost_distribution",
    "compute_metrics",
    "efficiency_distribution",
    "project_machine_metrics",
]
