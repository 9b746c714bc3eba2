from __future__ import annotations

import calendar
from datetime import date, datetime, timezone

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date: {value!r} (expected YYYY-MM-DD)")


def to_utc_day(value: date | datetime | str) -> date:
    """Normalize a day-ish value to the UTC calendar day it represents.

    Plain dates and ``YYYY-MM-DD`` strings are taken as-is. Naive datetimes are
    treated as UTC; aware datetimes are converted to UTC first.
    """

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()

    if isinstance(value, date):
        return value

    if isinstance(value, str):
        raw = value.strip()
        if len(raw) == 10:
            return parse_iso_date(raw)
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            return to_utc_day(datetime.fromisoformat(raw))
        except ValueError:
            raise ValidationError(f"Invalid date: {value!r}")

    raise ValidationError(f"Invalid date: {value!r}")


def month_range(month: str) -> tuple[date, date]:
    """Return first and last day for a ``YYYY-MM`` month string."""
    try:
        first = datetime.strptime(month, "%Y-%m").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid month: {month!r} (expected YYYY-MM)")
    last_day = calendar.monthrange(first.year, first.month)[1]
    return first, first.replace(day=last_day)


def utcnow() -> datetime:
    """Current UTC time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc)
