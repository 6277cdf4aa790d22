"""Timestamp coercion shared by payload normalization and date filters."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from math import isfinite


_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_timestamp_ms(raw: object | None, *, field_name: str) -> int:
    """Coerce epoch seconds/milliseconds, ISO-8601 text or datetimes to epoch ms (UTC)."""
    if raw is None:
        raise ValueError(f"{field_name} is required")
    if isinstance(raw, bool):
        raise ValueError(f"{field_name} must be a timestamp")
    if isinstance(raw, datetime):
        return _datetime_to_ms(raw)

    if isinstance(raw, (int, float)):
        numeric = float(raw)
    elif isinstance(raw, str):
        text = raw.strip()
        if not text:
            raise ValueError(f"{field_name} is required")
        try:
            numeric = float(text)
        except ValueError:
            return _parse_iso8601_ms(text, field_name=field_name)
    else:
        raise ValueError(f"{field_name} must be a timestamp")

    if not isfinite(numeric):
        raise ValueError(f"{field_name} must be finite")
    if numeric <= 0:
        raise ValueError(f"{field_name} must be > 0")

    # Heuristic: values below 1e11 are treated as epoch seconds.
    as_int = int(numeric)
    if as_int < 100_000_000_000:
        as_int *= 1000
    return as_int


def is_date_only(raw: object) -> bool:
    """Return True for calendar-date text such as ``2025-03-14``."""
    return isinstance(raw, str) and _DATE_ONLY.match(raw.strip()) is not None


def end_of_day_ms(timestamp_ms: int) -> int:
    """Return the last millisecond of the UTC day containing ``timestamp_ms``."""
    day = datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc).replace(
        hour=0, minute=0, second=0, microsecond=0
    )
    return _datetime_to_ms(day + timedelta(days=1)) - 1


def _parse_iso8601_ms(value: str, *, field_name: str) -> int:
    normalized = value
    if normalized.endswith("Z"):
        normalized = normalized[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(normalized)
    except ValueError as exc:
        raise ValueError(f"{field_name} must be an ISO-8601 timestamp") from exc
    return _datetime_to_ms(parsed)


def _datetime_to_ms(value: datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return round(value.timestamp() * 1000)
