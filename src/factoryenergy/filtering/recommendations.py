"""Recommendation filtering, quick filters and ranking."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from factoryenergy.domain.models import Difficulty, RecommendationPriority, RecommendationRecord
from factoryenergy.filtering.engine import (
    FilterField,
    PredicateKind,
    QuickFilter,
    RecordFilterSortEngine,
    SortField,
    SortKind,
    numeric_field,
    read_field,
)


PRIORITY_RANK: dict[str, int] = {
    RecommendationPriority.CRITICAL.value: 4,
    RecommendationPriority.HIGH.value: 3,
    RecommendationPriority.MEDIUM.value: 2,
    RecommendationPriority.LOW.value: 1,
}

EASY_DIFFICULTIES = frozenset({Difficulty.EASY.value, "Easy"})


@dataclass(frozen=True, slots=True)
class RecommendationQuickFilterThresholds:
    """Thresholds behind the named recommendation quick filters."""

    high_impact_min_savings: float = 2000.0
    quick_win_max_payback: float = 6.0
    low_cost_max_implementation: float = 10000.0

    def __post_init__(self) -> None:
        if self.high_impact_min_savings < 0:
            raise ValueError("high_impact_min_savings must be >= 0")
        if self.quick_win_max_payback < 0:
            raise ValueError("quick_win_max_payback must be >= 0")
        if self.low_cost_max_implementation < 0:
            raise ValueError("low_cost_max_implementation must be >= 0")


def build_quick_filters(thresholds: RecommendationQuickFilterThresholds) -> dict[str, QuickFilter]:
    """Return the named composite predicates for ``thresholds``."""

    def high_impact(record: object) -> bool:
        savings = numeric_field(record, "potential_savings")
        return savings is not None and savings >= thresholds.high_impact_min_savings

    def quick_wins(record: object) -> bool:
        payback = numeric_field(record, "payback_period")
        difficulty = read_field(record, "difficulty")
        return (
            payback is not None
            and payback <= thresholds.quick_win_max_payback
            and difficulty is not None
            and str(difficulty) in EASY_DIFFICULTIES
        )

    def low_cost(record: object) -> bool:
        cost = numeric_field(record, "implementation_cost")
        return cost is not None and cost <= thresholds.low_cost_max_implementation

    return {
        "high-impact": high_impact,
        "quick-wins": quick_wins,
        "low-cost": low_cost,
    }


def build_recommendation_engine(
    thresholds: RecommendationQuickFilterThresholds | None = None,
) -> RecordFilterSortEngine[RecommendationRecord]:
    return RecordFilterSortEngine(
        (
            FilterField("priority", PredicateKind.EXACT),
            FilterField("difficulty", PredicateKind.EXACT),
            FilterField("machine_id", PredicateKind.EXACT, aliases=("machineId",)),
            FilterField("category", PredicateKind.EXACT),
            FilterField(
                "min_savings",
                PredicateKind.MIN,
                attributes=("potential_savings",),
                aliases=("minSavings",),
            ),
            FilterField(
                "max_payback",
                PredicateKind.MAX,
                attributes=("payback_period",),
                aliases=("maxPayback",),
            ),
            FilterField("quick_filter", PredicateKind.QUICK, aliases=("quickFilter",)),
        ),
        quick_filters=build_quick_filters(thresholds or RecommendationQuickFilterThresholds()),
        sort_fields=(
            SortField("potential_savings", "potential_savings", aliases=("potentialSavings",)),
            SortField("payback_period", "payback_period", descending=False, aliases=("paybackPeriod",)),
            SortField("priority", "priority", kind=SortKind.RANK, rank=PRIORITY_RANK),
            SortField(
                "generated_at",
                "generated_at_ms",
                kind=SortKind.TIMESTAMP,
                aliases=("generatedAt", "generated_at_ms"),
            ),
        ),
    )


RECOMMENDATION_ENGINE = build_recommendation_engine()


def apply_recommendation_filters(
    recommendations: Sequence[RecommendationRecord],
    criteria: Mapping[str, object],
    *,
    engine: RecordFilterSortEngine[RecommendationRecord] = RECOMMENDATION_ENGINE,
) -> tuple[RecommendationRecord, ...]:
    """Filter recommendations and order them by the criteria's ``sort_by`` key.

    Without a ``sort_by`` entry the filtered records keep their input order.
    """
    if not isinstance(criteria, Mapping):
        raise TypeError("criteria must be a mapping")
    sort_by = criteria.get("sort_by", criteria.get("sortBy"))
    return engine.apply(recommendations, criteria, sort_by)
