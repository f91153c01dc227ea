"""Calendar helpers for installment due dates."""
from __future__ import annotations

import calendar
from datetime import date, datetime

from payment_plans.exceptions import InvalidStartMonth

MIN_DUE_DAY = 1
MAX_DUE_DAY = 31


def clamp_due_day(day: int) -> int:
    """Bring a stored due day into 1..31."""
    return max(MIN_DUE_DAY, min(MAX_DUE_DAY, int(day)))


def parse_start_month(value: str) -> date:
    """Parse a ``YYYY-MM`` string into the first day of that month."""
    if not isinstance(value, str) or len(value) != 7 or value[4] != "-":
        raise InvalidStartMonth(value=value)
    try:
        year = int(value[0:4])
        month = int(value[5:7])
    except ValueError:
        raise InvalidStartMonth(value=value)
    if month < 1 or month > 12:
        raise InvalidStartMonth("Mes de inicio invalido.", value=value)
    return date(year, month, 1)


def format_start_month(value: date) -> str:
    return f"{value.year:04d}-{value.month:02d}"


def add_months(start_month: date, months: int, day: int) -> date:
    """Return ``day`` of the month ``months`` after ``start_month``.

    The day is clamped to the last day of the resolved month, so day 31 in
    February falls on the 28th or 29th.
    """
    index = start_month.year * 12 + (start_month.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(clamp_due_day(day), last_day))


def installment_due_date(start_month: date, due_day: int, ordinal: int) -> date:
    """Due date of installment ``ordinal`` (1-based)."""
    return add_months(start_month, ordinal - 1, due_day)


def as_date(value) -> date:
    """Drop the time of day from ``value``; comparisons are whole-day."""
    if isinstance(value, datetime):
        return value.date()
    return value


def whole_months_between(start: date, end: date) -> int:
    """Number of complete months from ``start`` to ``end`` (0 if ``end`` is earlier).

    A month is complete once the same day-of-month is reached, clamped for
    short months: Jan 31 -> Feb 29 counts as one month.
    """
    if end <= start:
        return 0
    months = (end.year - start.year) * 12 + (end.month - start.month)
    anniversary = add_months(date(start.year, start.month, 1), months, start.day)
    if anniversary > end:
        months -= 1
    return max(months, 0)
