"""Plant-wide summary metrics over energy readings."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from math import isfinite
from typing import Protocol

from factoryenergy.analytics.reductions import require_sequence, rounded_mean_field, sum_field
from factoryenergy.domain.models import EnergyReading, Machine


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MetricsForecast:
    """Output of an external predictive step."""

    predicted_efficiency: float
    anomaly_risk: float


class MetricsForecaster(Protocol):
    """Best-effort predictive enrichment, typically backed by a remote model."""

    def forecast(
        self,
        readings: Sequence[EnergyReading],
        metrics: EnergyMetrics,
    ) -> MetricsForecast: ...


@dataclass(frozen=True, slots=True)
class EnergyMetrics:
    """Scalar dashboard metrics.

    ``current_consumption`` mirrors ``total_consumption`` and ``average_cost``
    mirrors ``daily_cost``: both pairs are plain sums over the supplied readings.
    """

    total_consumption: float
    current_consumption: float
    daily_cost: float
    average_cost: float
    efficiency: int
    co2_footprint: float
    predicted_efficiency: float
    anomaly_risk: float


def compute_metrics(
    readings: Sequence[EnergyReading],
    machines: Sequence[Machine],
    *,
    forecaster: MetricsForecaster | None = None,
) -> EnergyMetrics:
    """Reduce readings into consumption, cost, efficiency and CO2 metrics.

    ``machines`` is accepted for interface symmetry with the cost distribution
    and is only validated. When ``forecaster`` fails or returns unusable values
    the prediction falls back to the measured efficiency with zero anomaly risk.
    """
    require_sequence(readings, name="readings")
    require_sequence(machines, name="machines")

    consumption = sum_field(readings, "power_usage_kw")
    cost = sum_field(readings, "cost_mad")
    efficiency = rounded_mean_field(readings, "efficiency_score")
    base = EnergyMetrics(
        total_consumption=consumption,
        current_consumption=consumption,
        daily_cost=cost,
        average_cost=cost,
        efficiency=efficiency,
        co2_footprint=sum_field(readings, "co2"),
        predicted_efficiency=float(efficiency),
        anomaly_risk=0.0,
    )
    if forecaster is None:
        return base

    forecast = _safe_forecast(forecaster, readings, base)
    if forecast is None:
        return base
    return EnergyMetrics(
        total_consumption=base.total_consumption,
        current_consumption=base.current_consumption,
        daily_cost=base.daily_cost,
        average_cost=base.average_cost,
        efficiency=base.efficiency,
        co2_footprint=base.co2_footprint,
        predicted_efficiency=forecast.predicted_efficiency,
        anomaly_risk=forecast.anomaly_risk,
    )


def _safe_forecast(
    forecaster: MetricsForecaster,
    readings: Sequence[EnergyReading],
    metrics: EnergyMetrics,
) -> MetricsForecast | None:
    try:
        forecast = forecaster.forecast(readings, metrics)
    except Exception as exc:
        logger.warning("Metrics forecast failed, using measured efficiency: %s", exc)
        return None

    if not isinstance(forecast, MetricsForecast):
        logger.warning("Metrics forecast returned %s, using measured efficiency", type(forecast).__name__)
        return None
    predicted = float(forecast.predicted_efficiency)
    risk = float(forecast.anomaly_risk)
    if not isfinite(predicted) or not isfinite(risk) or risk < 0.0:
        logger.warning(
            "Metrics forecast out of range (predicted_efficiency=%s, anomaly_risk=%s)",
            predicted,
            risk,
        )
        return None
    return MetricsForecast(predicted_efficiency=predicted, anomaly_risk=risk)
