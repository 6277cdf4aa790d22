"""Tests for cost distribution across machine categories."""

from __future__ import annotations

from math import ceil, floor

import pytest

from factoryenergy.analytics import COST_CATEGORIES, CostBucket, compute_cost_distribution
from factoryenergy.domain import EnergyReading, Machine


def _reading(machine_id: str, cost: float) -> EnergyReading:
    return EnergyReading(machine_id=machine_id, timestamp_ms=1_741_935_600_000, cost_mad=cost)


_ROSTER = (
    Machine(id="M1", name="Compressor", type="compressor", status="operational"),
    Machine(id="L1", name="Hall lights", type="lighting", status="operational"),
    Machine(id="C1", name="Chiller", type="cooling", status="operational"),
    Machine(id="P1", name="Packer", type="packaging", status="operational"),
    Machine(id="H1", name="Heater", type="heater", status="operational"),
)


def test_single_category_takes_full_share() -> None:
    readings = (_reading("M1", 50), _reading("M1", 75))
    buckets = compute_cost_distribution(readings, (Machine(id="M1", name="A", type="compressor", status="ok"),))

    assert buckets == (
        CostBucket(name="Production Machines", value=125.0, percentage=100),
        CostBucket(name="Lighting", value=0.0, percentage=0),
        CostBucket(name="Cooling", value=0.0, percentage=0),
        CostBucket(name="Auxiliary Equipment", value=0.0, percentage=0),
    )


def test_output_keeps_category_declaration_order() -> None:
    readings = (_reading("P1", 500), _reading("L1", 10), _reading("M1", 1))
    buckets = compute_cost_distribution(readings, _ROSTER)

    assert [bucket.name for bucket in buckets] == [category.name for category in COST_CATEGORIES]


def test_unresolved_and_uncategorized_readings_are_dropped() -> None:
    readings = (_reading("M1", 50), _reading("GHOST", 30), _reading("H1", 20))
    buckets = compute_cost_distribution(readings, _ROSTER)

    assert buckets[0].value == pytest.approx(50.0)
    assert buckets[0].percentage == 50
    assert sum(bucket.value for bucket in buckets) == pytest.approx(50.0)
    assert sum(bucket.percentage for bucket in buckets) < 100


def test_bucket_values_conserve_resolved_cost() -> None:
    readings = (
        _reading("M1", 12.5),
        _reading("L1", 3.25),
        _reading("C1", 7.0),
        _reading("P1", 1.75),
        _reading("GHOST", 99.0),
    )
    buckets = compute_cost_distribution(readings, _ROSTER)

    assert sum(bucket.value for bucket in buckets) == pytest.approx(12.5 + 3.25 + 7.0 + 1.75)


def test_zero_total_cost_gives_zero_percentages() -> None:
    buckets = compute_cost_distribution((_reading("M1", 0), _reading("L1", 0)), _ROSTER)
    assert all(bucket.percentage == 0 for bucket in buckets)


def test_empty_inputs_give_zero_buckets() -> None:
    buckets = compute_cost_distribution([], [])

    assert len(buckets) == len(COST_CATEGORIES)
    assert all(bucket.value == 0.0 and bucket.percentage == 0 for bucket in buckets)


def test_rounded_percentages_never_exceed_one_hundred() -> None:
    # 37.5% and 62.5% both round up under half-up rounding.
    readings = (_reading("M1", 1.5), _reading("L1", 2.5))
    buckets = compute_cost_distribution(readings, _ROSTER)

    shares = (37.5, 62.5, 0.0, 0.0)
    assert sum(bucket.percentage for bucket in buckets) == 100
    for bucket, share in zip(buckets, shares):
        assert floor(share) <= bucket.percentage <= ceil(share)
        assert 0 <= bucket.percentage <= 100
