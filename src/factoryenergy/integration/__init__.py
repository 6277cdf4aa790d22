"""Adapters for the mock REST data source and the AI recommendation source."""

from factoryenergy.integration.ai_recommendations import (
    collect_ai_recommendations,
    fallback_recommendation,
    parse_ai_recommendations,
)
from factoryenergy.integration.json_server_contracts import (
    DashboardSnapshot,
    load_dashboard_snapshot,
    normalize_alert,
    normalize_energy_reading,
    normalize_machine,
    normalize_recommendation,
    snapshot_from_payload,
)

__all__ = [
    "DashboardSnapshot",
    "collect_ai_recommendations",
    "fallback_recommendation",
    "load_dashboard_snapshot",
    "normalize_alert",
    "normalize_energy_reading",
    "normalize_machine",
    "normalize_recommendation",
    "parse_ai_recommendations",
    "snapshot_from_payload",
]
