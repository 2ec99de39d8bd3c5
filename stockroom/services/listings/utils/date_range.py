"""Date-only boundary normalization for half-open timestamp ranges.

A filter such as ``createdBefore=2026-01-20`` is meant to include the whole
of 20 January. Comparing a timestamp column against the bare date with
``<=`` would drop everything after midnight, so the upper bound is moved
to the start of the following day and compared with ``<``:

    created_at >= 2026-01-20T00:00:00.000Z AND created_at < 2026-01-21T00:00:00.000Z
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Mapping


def to_calendar_day(value: Any) -> date | None:
    """Return the UTC calendar day a value denotes, or ``None`` if unparseable."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return to_calendar_day(datetime.fromisoformat(text))
    except ValueError:
        return None


def utc_midnight_iso(day: date) -> str:
    """Render ``day`` at 00:00:00.000 UTC in ISO-8601 with millisecond precision."""
    return f"{day.isoformat()}T00:00:00.000Z"


def normalize_date_range(filters: Mapping[str, Any] | None, after_key: str, before_key: str) -> dict[str, Any]:
    """Return a copy of ``filters`` with date-only bounds widened to a half-open range.

    ``filters[after_key]`` becomes the start of its day (inclusive) and
    ``filters[before_key]`` becomes the start of the following day
    (exclusive). Missing or unparseable values are copied through untouched.
    The input mapping is never mutated.
    """
    normalized = dict(filters or {})

    after_day = to_calendar_day(normalized.get(after_key))
    if after_day is not None:
        normalized[after_key] = utc_midnight_iso(after_day)

    before_day = to_calendar_day(normalized.get(before_key))
    if before_day is not None:
        normalized[before_key] = utc_midnight_iso(before_day + timedelta(days=1))

    return normalized


def normalize_date_ranges(filters: Mapping[str, Any] | None, *pairs: tuple[str, str]) -> dict[str, Any]:
    """Apply :func:`normalize_date_range` for several ``(after_key, before_key)`` pairs."""
    normalized = dict(filters or {})
    for after_key, before_key in pairs:
        normalized = normalize_date_range(normalized, after_key, before_key)
    return normalized


def parse_bound(value: Any) -> datetime | None:
    """Convert a bound into a timezone-aware ``datetime`` for binding.

    asyncpg binds timestamps as ``datetime`` objects, not strings. Naive
    values are taken to be UTC. Returns ``None`` for anything that does not
    parse, which callers treat as "no bound".
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=timezone.utc)
