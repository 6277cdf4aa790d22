"""Normalization of mock REST (json-server) payloads into domain records.

The dashboard data source serves loosely typed JSON collections whose keys mix
snake_case and camelCase. These helpers map them onto the strict domain
dataclasses: readings get 0 for missing numeric fields, filterable records
keep ``None`` so that criteria referencing an absent field fail.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from math import isfinite
from pathlib import Path
from typing import Any

from factoryenergy.domain.models import (
    AlertRecord,
    AlertSeverity,
    AlertStatus,
    Difficulty,
    EnergyReading,
    Machine,
    RecommendationPriority,
    RecommendationRecord,
)
from factoryenergy.domain.timestamps import parse_timestamp_ms


logger = logging.getLogger(__name__)

READING_COLLECTIONS = ("energy", "energyReadings")


@dataclass(frozen=True, slots=True)
class DashboardSnapshot:
    """All collections fetched for one dashboard refresh."""

    machines: tuple[Machine, ...]
    readings: tuple[EnergyReading, ...]
    alerts: tuple[AlertRecord, ...]
    recommendations: tuple[RecommendationRecord, ...]


def normalize_energy_reading(payload: Mapping[str, object]) -> EnergyReading:
    """Normalize one energy reading payload."""
    return EnergyReading(
        machine_id=_require_text(_pick(payload, "machine_id", "machineId"), field_name="machine_id"),
        timestamp_ms=parse_timestamp_ms(
            _pick(payload, "timestamp", "timestamp_ms", "timestampMs"),
            field_name="timestamp",
        ),
        power_usage_kw=_float_or_zero(
            _pick(payload, "power_usage_kW", "power_usage_kw", "powerUsageKw", "powerConsumption"),
            field_name="power_usage_kw",
        ),
        cost_mad=_float_or_zero(_pick(payload, "cost_mad", "costMad"), field_name="cost_mad"),
        efficiency_score=_float_or_zero(
            _pick(payload, "efficiency_score", "efficiencyScore"),
            field_name="efficiency_score",
        ),
        co2=_float_or_zero(_pick(payload, "co2", "co2_kg"), field_name="co2"),
        voltage=_optional_float(_pick(payload, "voltage"), field_name="voltage"),
        current=_optional_float(_pick(payload, "current"), field_name="current"),
        power_factor=_optional_float(_pick(payload, "power_factor", "powerFactor"), field_name="power_factor"),
    )


def normalize_machine(payload: Mapping[str, object]) -> Machine:
    """Normalize one machine roster entry."""
    machine_id = _require_text(_pick(payload, "id", "machine_id"), field_name="id")
    raw_maintenance = _pick(payload, "lastMaintenance", "last_maintenance")
    return Machine(
        id=machine_id,
        name=_text_or_none(_pick(payload, "name")) or machine_id,
        type=(_text_or_none(_pick(payload, "type")) or "").lower(),
        status=_text_or_none(_pick(payload, "status")) or "unknown",
        department=_text_or_none(_pick(payload, "department")),
        efficiency=_optional_float(_pick(payload, "efficiency"), field_name="efficiency"),
        current_power_kw=_optional_float(_pick(payload, "currentPower", "current_power_kw"), field_name="currentPower"),
        temperature_c=_optional_float(_pick(payload, "temperature", "temperature_c"), field_name="temperature"),
        last_maintenance_ms=(
            None if _text_or_none(raw_maintenance) is None
            else parse_timestamp_ms(raw_maintenance, field_name="lastMaintenance")
        ),
        alert_message=_text_or_none(_pick(payload, "alertMessage", "alert_message")),
        generated_by=_text_or_none(_pick(payload, "generated_by", "generatedBy")),
    )


def normalize_alert(payload: Mapping[str, object]) -> AlertRecord:
    """Normalize one alert; unknown severities and statuses become ``None``."""
    raw_timestamp = _pick(payload, "timestamp", "timestamp_ms")
    return AlertRecord(
        id=_require_text(_pick(payload, "id"), field_name="id"),
        title=_text_or_none(_pick(payload, "title")),
        description=_text_or_none(_pick(payload, "description")),
        severity=_enum_or_none(AlertSeverity, _pick(payload, "severity")),
        status=_enum_or_none(AlertStatus, _pick(payload, "status")),
        category=_text_or_none(_pick(payload, "category")),
        location=_text_or_none(_pick(payload, "location")),
        machine_id=_text_or_none(_pick(payload, "machine_id", "machineId")),
        timestamp_ms=_optional_timestamp(raw_timestamp, field_name="timestamp"),
        action=_text_or_none(_pick(payload, "action")),
        generated_by=_text_or_none(_pick(payload, "generated_by", "generatedBy")),
    )


def normalize_recommendation(
    payload: Mapping[str, object],
    *,
    default_priority: RecommendationPriority | None = RecommendationPriority.MEDIUM,
) -> RecommendationRecord:
    """Normalize one recommendation; an unknown priority falls back to ``default_priority``."""
    priority = _enum_or_none(RecommendationPriority, _pick(payload, "priority"))
    raw_steps = _pick(payload, "implementation_steps", "implementationSteps")
    steps: tuple[str, ...] = ()
    if isinstance(raw_steps, Sequence) and not isinstance(raw_steps, str):
        steps = tuple(str(step) for step in raw_steps)

    return RecommendationRecord(
        id=_require_text(_pick(payload, "id"), field_name="id"),
        title=_text_or_none(_pick(payload, "title")),
        description=_text_or_none(_pick(payload, "description")),
        machine_id=_text_or_none(_pick(payload, "machine_id", "machineId")),
        category=_text_or_none(_pick(payload, "category")),
        priority=priority if priority is not None else default_priority,
        difficulty=_difficulty_or_none(_pick(payload, "difficulty")),
        potential_savings=_optional_float(
            _pick(payload, "potential_savings", "potentialSavings"),
            field_name="potential_savings",
        ),
        payback_period=_optional_float(
            _pick(payload, "payback_period", "paybackPeriod"),
            field_name="payback_period",
        ),
        implementation_cost=_optional_float(
            _pick(payload, "implementation_cost", "implementationCost"),
            field_name="implementation_cost",
        ),
        energy_reduction=_optional_float(
            _pick(payload, "energy_reduction", "energyReduction"),
            field_name="energy_reduction",
        ),
        implementation_steps=steps,
        generated_at_ms=_optional_timestamp(
            _pick(payload, "generated_at", "generatedAt"),
            field_name="generated_at",
        ),
        generated_by=_text_or_none(_pick(payload, "generated_by", "generatedBy")),
    )


def snapshot_from_payload(payload: Mapping[str, object]) -> DashboardSnapshot:
    """Build a snapshot from a json-server database document."""
    reading_key = next((key for key in READING_COLLECTIONS if key in payload), READING_COLLECTIONS[0])
    return DashboardSnapshot(
        machines=tuple(normalize_machine(item) for item in _collection(payload, "machines")),
        readings=tuple(normalize_energy_reading(item) for item in _collection(payload, reading_key)),
        alerts=tuple(normalize_alert(item) for item in _collection(payload, "alerts")),
        recommendations=tuple(
            normalize_recommendation(item) for item in _collection(payload, "recommendations")
        ),
    )


def load_dashboard_snapshot(path: Path) -> DashboardSnapshot:
    """Read a json-server ``db.json`` file into a snapshot."""
    payload: Any = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(payload, Mapping):
        raise ValueError(f"{path} must contain a JSON object of collections")
    snapshot = snapshot_from_payload(payload)
    logger.info(
        "Loaded snapshot %s: %d machines, %d readings, %d alerts, %d recommendations",
        path,
        len(snapshot.machines),
        len(snapshot.readings),
        len(snapshot.alerts),
        len(snapshot.recommendations),
    )
    return snapshot


def _collection(payload: Mapping[str, object], key: str) -> list[Mapping[str, object]]:
    raw = payload.get(key)
    if raw is None:
        return []
    if isinstance(raw, (str, bytes)) or not isinstance(raw, Sequence):
        raise ValueError(f"{key} must be a list")
    items: list[Mapping[str, object]] = []
    for idx, item in enumerate(raw):
        if not isinstance(item, Mapping):
            raise ValueError(f"{key}[{idx}] must be an object")
        items.append(item)
    return items


def _pick(payload: Mapping[str, object], *keys: str) -> object | None:
    for key in keys:
        if key in payload:
            return payload[key]
    return None


def _text_or_none(raw: object | None) -> str | None:
    if raw is None:
        return None
    if isinstance(raw, str):
        value = raw.strip()
        return value or None
    return str(raw).strip() or None


def _require_text(raw: object | None, *, field_name: str) -> str:
    value = _text_or_none(raw)
    if value is None:
        raise ValueError(f"{field_name} is required")
    return value


def _optional_float(raw: object | None, *, field_name: str) -> float | None:
    if raw is None:
        return None
    if isinstance(raw, bool):
        raise ValueError(f"{field_name} must be numeric")
    if isinstance(raw, (int, float)):
        value = float(raw)
    elif isinstance(raw, str):
        text = raw.strip()
        if not text:
            return None
        try:
            value = float(text)
        except ValueError as exc:
            raise ValueError(f"{field_name} must be numeric") from exc
    else:
        raise ValueError(f"{field_name} must be numeric")

    if not isfinite(value):
        raise ValueError(f"{field_name} must be finite")
    return value


def _float_or_zero(raw: object | None, *, field_name: str) -> float:
    value = _optional_float(raw, field_name=field_name)
    return 0.0 if value is None else value


def _optional_timestamp(raw: object | None, *, field_name: str) -> int | None:
    if _text_or_none(raw) is None:
        return None
    return parse_timestamp_ms(raw, field_name=field_name)


def _enum_or_none(enum_type: Any, raw: object | None) -> Any:
    text = _text_or_none(raw)
    if text is None:
        return None
    try:
        return enum_type(text)
    except ValueError:
        return None


def _difficulty_or_none(raw: object | None) -> Difficulty | None:
    text = _text_or_none(raw)
    if text is not None and text.lower() == "easy":
        return Difficulty.EASY
    return _enum_or_none(Difficulty, text)
