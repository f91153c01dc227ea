"""When to remind a payer of an upcoming due date and when to send collection notices."""
from __future__ import annotations

import calendar
from datetime import date, timedelta

from payment_plans.conf import get_collection_days_after, get_reminder_days_before
from payment_plans.dates import as_date
from payment_plans.status import next_due_date


def days_until_due(plan, progress, today) -> int | None:
    """Days from ``today`` to the next due date (negative when late)."""
    due = next_due_date(plan, progress, today)
    if due is None:
        return None
    return (due - as_date(today)).days


def needs_reminder(plan, progress, today, days_before=None) -> bool:
    """True while the next due date is ahead and at most ``days_before`` days away."""
    if days_before is None:
        days_before = get_reminder_days_before()
    remaining = days_until_due(plan, progress, today)
    return remaining is not None and 0 < remaining <= days_before


def is_collection_day(due_date: date, today, days_after=None) -> bool:
    """Whether a collection notice for an item due on ``due_date`` is due ``today``.

    The first notice goes out ``days_after`` days past the due date. After
    that, notices follow the same day of every month, clamped to the length
    of the current month; a later day in the month also qualifies, so a
    missed run catches up.
    """
    if days_after is None:
        days_after = get_collection_days_after()
    reference = as_date(today)
    first_notice = due_date + timedelta(days=days_after)
    if reference < first_notice:
        return False
    days_in_month = calendar.monthrange(reference.year, reference.month)[1]
    return reference.day >= min(first_notice.day, days_in_month)
