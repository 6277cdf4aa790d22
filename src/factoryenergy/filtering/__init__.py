"""Criteria-driven filtering and ordering of alerts, recommendations and machines."""

from factoryenergy.filtering.alerts import (
    ALERT_ENGINE,
    ALERT_TABS,
    DEFAULT_ALERT_SORT,
    SEVERITY_RANK,
    AlertCounts,
    apply_alert_filters,
    count_alerts,
)
from factoryenergy.filtering.engine import (
    DateRange,
    FilterField,
    PredicateKind,
    RecordFilterSortEngine,
    SortField,
    SortKind,
    SortSpec,
)
from factoryenergy.filtering.machines import MACHINE_ENGINE, apply_machine_filters
from factoryenergy.filtering.recommendations import (
    PRIORITY_RANK,
    RECOMMENDATION_ENGINE,
    RecommendationQuickFilterThresholds,
    apply_recommendation_filters,
    build_recommendation_engine,
)

__all__ = [
    "ALERT_ENGINE",
    "ALERT_TABS",
    "AlertCounts",
    "DEFAULT_ALERT_SORT",
    "DateRange",
    "FilterField",
    "MACHINE_ENGINE",
    "PRIORITY_RANK",
    "PredicateKind",
    "RECOMMENDATION_ENGINE",
    "RecommendationQuickFilterThresholds",
    "RecordFilterSortEngine",
    "SEVERITY_RANK",
    "SortField",
    "SortKind",
    "SortSpec",
    "apply_alert_filters",
    "apply_machine_filters",
    "apply_recommendation_filters",
    "build_recommendation_engine",
    "count_alerts",
]
