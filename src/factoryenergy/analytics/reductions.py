"""Shared numeric reductions over reading collections."""

from __future__ import annotations

from collections.abc import Sequence
from math import floor

import numpy as np
import numpy.typing as npt

from factoryenergy.domain.models import EnergyReading


FloatArray = npt.NDArray[np.float64]


def require_sequence(values: object, *, name: str) -> Sequence[object]:
    """Raise if ``values`` is not a list-like collection of records."""
    if isinstance(values, (str, bytes)) or not isinstance(values, Sequence):
        raise TypeError(f"{name} must be a sequence of records")
    return values


def field_array(readings: Sequence[EnergyReading], field_name: str) -> FloatArray:
    """Collect one numeric reading field as float64, absent values as 0."""
    values = [getattr(reading, field_name, None) for reading in readings]
    return np.asarray([0.0 if value is None else value for value in values], dtype=np.float64)


def sum_field(readings: Sequence[EnergyReading], field_name: str) -> float:
    if len(readings) == 0:
        return 0.0
    return float(np.sum(field_array(readings, field_name)))


def rounded_mean_field(readings: Sequence[EnergyReading], field_name: str) -> int:
    if len(readings) == 0:
        return 0
    return round_half_up(float(np.mean(field_array(readings, field_name))))


def round_half_up(value: float) -> int:
    """Round to nearest integer with halves rounded towards +inf."""
    return int(floor(value + 0.5))
