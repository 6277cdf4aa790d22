"""Cost distribution across machine categories."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from factoryenergy.analytics.reductions import require_sequence, round_half_up, sum_field
from factoryenergy.domain.models import EnergyReading, Machine


@dataclass(frozen=True, slots=True)
class CostCategory:
    """Named group of machine types sharing one cost bucket."""

    name: str
    machine_types: frozenset[str]


@dataclass(frozen=True, slots=True)
class CostBucket:
    """Cost attributed to one category and its share of total cost."""

    name: str
    value: float
    percentage: int


COST_CATEGORIES: tuple[CostCategory, ...] = (
    CostCategory("Production Machines", frozenset({"compressor", "cutter", "mixer", "pump"})),
    CostCategory("Lighting", frozenset({"lighting"})),
    CostCategory("Cooling", frozenset({"cooling"})),
    CostCategory("Auxiliary Equipment", frozenset({"conveyor", "packaging"})),
)


def compute_cost_distribution(
    readings: Sequence[EnergyReading],
    machines: Sequence[Machine],
    *,
    categories: Sequence[CostCategory] = COST_CATEGORIES,
) -> tuple[CostBucket, ...]:
    """Bucket reading costs by machine category, in category declaration order.

    Readings whose machine is unknown, or whose machine type belongs to no
    category, count towards the total but towards no bucket.
    """
    require_sequence(readings, name="readings")
    require_sequence(machines, name="machines")

    total_cost = sum_field(readings, "cost_mad")
    type_by_machine = {machine.id: machine.type for machine in machines}

    values: list[float] = []
    for category in categories:
        costs = [
            reading.cost_mad or 0.0
            for reading in readings
            if type_by_machine.get(reading.machine_id) in category.machine_types
        ]
        values.append(float(np.sum(np.asarray(costs, dtype=np.float64))) if costs else 0.0)

    percentages = _bounded_percentages(values, total_cost=total_cost)
    return tuple(
        CostBucket(name=category.name, value=value, percentage=percentage)
        for category, value, percentage in zip(categories, values, percentages)
    )


def _bounded_percentages(values: Sequence[float], *, total_cost: float) -> list[int]:
    if total_cost <= 0:
        return [0 for _ in values]

    shares = [value / total_cost * 100.0 for value in values]
    percentages = [round_half_up(share) for share in shares]
    excess = sum(percentages) - 100
    if excess > 0:
        # Half-up rounding of several buckets can overshoot 100; give the
        # points back from the buckets that were rounded up the most.
        rounded_up = sorted(
            (idx for idx, share in enumerate(shares) if percentages[idx] > share),
            key=lambda idx: percentages[idx] - shares[idx],
            reverse=True,
        )
        for idx in rounded_up[:excess]:
            percentages[idx] -= 1
    return percentages
