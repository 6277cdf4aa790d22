"""Core domain models for factory energy monitoring."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class AlertSeverity(StrEnum):
    """Alert severity levels, most severe first."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"


class AlertStatus(StrEnum):
    """Alert handling lifecycle states."""

    NEW = "new"
    ACKNOWLEDGED = "acknowledged"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


class RecommendationPriority(StrEnum):
    """Recommendation priority labels as produced by the recommendation source."""

    CRITICAL = "Critique"
    HIGH = "Élevée"
    MEDIUM = "Moyenne"
    LOW = "Faible"


class Difficulty(StrEnum):
    """Implementation difficulty of a recommendation."""

    EASY = "Facile"
    MODERATE = "Modérée"
    HARD = "Difficile"


@dataclass(frozen=True, slots=True)
class EnergyReading:
    """One timestamped power/cost/efficiency sample for a machine."""

    machine_id: str
    timestamp_ms: int
    power_usage_kw: float = 0.0
    cost_mad: float = 0.0
    efficiency_score: float = 0.0
    co2: float = 0.0
    voltage: float | None = None
    current: float | None = None
    power_factor: float | None = None

    def __post_init__(self) -> None:
        if not self.machine_id.strip():
            raise ValueError("machine_id is required")
        if self.timestamp_ms <= 0:
            raise ValueError("timestamp_ms must be > 0")


@dataclass(frozen=True, slots=True)
class Machine:
    """A monitored physical unit on the factory floor."""

    id: str
    name: str
    type: str
    status: str
    department: str | None = None
    efficiency: float | None = None
    current_power_kw: float | None = None
    temperature_c: float | None = None
    last_maintenance_ms: int | None = None
    alert_message: str | None = None
    generated_by: str | None = None


@dataclass(frozen=True, slots=True)
class AlertRecord:
    """Alert raised against a machine or a plant location."""

    id: str
    title: str | None = None
    description: str | None = None
    severity: AlertSeverity | None = None
    status: AlertStatus | None = None
    category: str | None = None
    location: str | None = None
    machine_id: str | None = None
    timestamp_ms: int | None = None
    action: str | None = None
    generated_by: str | None = None


@dataclass(frozen=True, slots=True)
class RecommendationRecord:
    """Energy-saving recommendation for one machine."""

    id: str
    title: str | None = None
    description: str | None = None
    machine_id: str | None = None
    category: str | None = None
    priority: RecommendationPriority | None = None
    difficulty: Difficulty | None = None
    potential_savings: float | None = None
    payback_period: float | None = None
    implementation_cost: float | None = None
    energy_reduction: float | None = None
    implementation_steps: tuple[str, ...] = field(default_factory=tuple)
    generated_at_ms: int | None = None
    generated_by: str | None = None
