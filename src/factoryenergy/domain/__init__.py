"""Domain models for readings, machines, alerts and recommendations."""

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

__all__ = [
    "AlertRecord",
    "AlertSeverity",
    "AlertStatus",
    "Difficulty",
    "EnergyReading",
    "Machine",
    "RecommendationPriority",
    "RecommendationRecord",
]
