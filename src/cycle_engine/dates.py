"""Shared date arithmetic for the cycle and lunar calculators.

Dates are treated as local midnight.  Timezone-aware datetimes are reduced to
their wall-clock value so that a caller's "now" and a stored anchor date are
always compared on the same naive calendar.
"""

from __future__ import annotations

import math
from datetime import date, datetime, time, timedelta

SECONDS_PER_DAY = 86_400


def as_datetime(value: date | datetime) -> datetime:
    """Return a naive datetime for a date (midnight) or datetime."""
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    return datetime.combine(value, time.min)


def as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def parse_iso_date(value: str | date | datetime) -> date:
    """Parse a ``YYYY-MM-DD`` key, passing date objects through.

    Raises:
        ValueError: If the string is not an ISO calendar date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value.strip()[:10])


def fractional_days_between(start: date | datetime, end: date | datetime) -> float:
    """Signed number of days from ``start`` to ``end``, with fractions."""
    delta = as_datetime(end) - as_datetime(start)
    return delta.total_seconds() / SECONDS_PER_DAY


def whole_days_since(start: date | datetime, end: date | datetime) -> int:
    """``floor`` of the days elapsed from ``start`` to ``end``."""
    return math.floor(fractional_days_between(start, end))


def days_until(target: date | datetime, now: date | datetime) -> int:
    """``ceil`` of the days remaining from ``now`` to ``target``."""
    return math.ceil(fractional_days_between(now, target))


def add_days(value: date, days: int) -> date:
    return value + timedelta(days=days)
