"""Parsing of AI-generated recommendations with a deterministic fallback."""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Callable, Mapping, Sequence
from math import isfinite

from factoryenergy.domain.models import Difficulty, Machine, RecommendationPriority, RecommendationRecord
from factoryenergy.integration.json_server_contracts import normalize_recommendation


logger = logging.getLogger(__name__)

AI_SOURCE = "AI assistant"
FALLBACK_SOURCE = "Fallback system"
DEFAULT_FALLBACK_MACHINE_ID = "COMP-001"
PLACEHOLDER_STEPS = ("Step 1: to be determined", "Step 2: to be planned")

_CODE_FENCE = re.compile(r"```(?:json)?")


def parse_ai_recommendations(text: str, *, generated_at_ms: int) -> tuple[RecommendationRecord, ...]:
    """Parse a ``{"recommendations": [...]}`` document returned by a text model.

    Markdown code fences are stripped. Numbers are coerced (absent or invalid
    values become 0), invalid priorities become ``Moyenne`` and missing
    implementation steps are replaced by placeholders.
    """
    cleaned = _CODE_FENCE.sub("", text).strip()
    try:
        document = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise ValueError(f"AI response is not valid JSON: {exc.msg}") from exc

    if not isinstance(document, Mapping):
        raise ValueError("AI response must be a JSON object")
    items = document.get("recommendations")
    if not isinstance(items, list):
        raise ValueError("AI response must contain a recommendations list")

    records: list[RecommendationRecord] = []
    for idx, item in enumerate(items):
        if not isinstance(item, Mapping):
            raise ValueError(f"recommendations[{idx}] must be an object")
        payload = dict(item)
        payload["id"] = f"REC-AI-{generated_at_ms}-{idx}"
        payload["generated_at"] = generated_at_ms
        payload["generated_by"] = AI_SOURCE
        for key in ("potential_savings", "energy_reduction", "implementation_cost"):
            payload[key] = _number_or_zero(payload.get(key))
        if not isinstance(payload.get("implementation_steps"), list):
            payload["implementation_steps"] = list(PLACEHOLDER_STEPS)
        payload["payback_period"] = _number_or_none(payload.get("payback_period"))
        records.append(normalize_recommendation(payload))
    return tuple(records)


def fallback_recommendation(machines: Sequence[Machine], *, generated_at_ms: int) -> RecommendationRecord:
    """Return the recommendation shown when the AI source is unavailable."""
    machine_id = machines[0].id if machines else DEFAULT_FALLBACK_MACHINE_ID
    return RecommendationRecord(
        id=f"REC-FALLBACK-{generated_at_ms}",
        title="Equipment optimization",
        description="Tune operating parameters for better efficiency",
        machine_id=machine_id,
        priority=RecommendationPriority.MEDIUM,
        difficulty=Difficulty.MODERATE,
        potential_savings=1200.0,
        payback_period=6.0,
        implementation_cost=3000.0,
        energy_reduction=10.0,
        implementation_steps=(
            "Analyze current parameters",
            "Adjust configurations",
            "Verify performance",
        ),
        generated_at_ms=generated_at_ms,
        generated_by=FALLBACK_SOURCE,
    )


def collect_ai_recommendations(
    fetch: Callable[[], str],
    *,
    machines: Sequence[Machine],
    generated_at_ms: int,
) -> tuple[RecommendationRecord, ...]:
    """Call the AI source and parse its answer; any failure yields the fallback record."""
    try:
        records = parse_ai_recommendations(fetch(), generated_at_ms=generated_at_ms)
    except Exception as exc:
        logger.warning("AI recommendation source failed, using fallback: %s", exc)
        return (fallback_recommendation(machines, generated_at_ms=generated_at_ms),)
    logger.info("Received %d AI recommendations", len(records))
    return records


def _number_or_none(raw: object) -> float | None:
    if isinstance(raw, bool) or not isinstance(raw, (int, float, str)):
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if isfinite(value) else None


def _number_or_zero(raw: object) -> float:
    value = _number_or_none(raw)
    return 0.0 if value is None else value
