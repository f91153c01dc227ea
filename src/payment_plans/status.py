"""Payment status, due dates and late interest.

Every function takes the reference date (``today``) as an argument; nothing
here reads the system clock. A plan never becomes paid because time passes:
only :func:`register_payment` advances its progress.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, localcontext

from payment_plans.dates import as_date, whole_months_between
from payment_plans.exceptions import PlanAlreadySettled
from payment_plans.structuring import build_dated_schedule, cash_amount, plan_total
from payment_plans.types import (
    InterestCompounding,
    LateInterestPolicy,
    PaymentPlan,
    PaymentProgress,
    PaymentStatus,
)

logger = logging.getLogger("leilao")

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

ITEM_CASH = "a_vista"
ITEM_DOWN_PAYMENT = "entrada"
ITEM_INSTALLMENT = "parcela"


@dataclass(frozen=True)
class DueItem:
    """One payable item: the cash amount, the down payment or an installment."""

    kind: str
    ordinal: int
    amount: Decimal
    due_date: date | None


@dataclass(frozen=True)
class PaymentSituation:
    status: str
    next_due_date: date | None
    amount_due: Decimal | None
    late_interest: Decimal
    amount_paid: Decimal
    outstanding: Decimal
    overdue_items: list


@dataclass(frozen=True)
class CollectionTotals:
    expected: Decimal
    paid: Decimal
    pending: Decimal


# ---------------------------------------------------------------------------
# Payable items
# ---------------------------------------------------------------------------

def _tracks_down_payment(plan: PaymentPlan) -> bool:
    return plan.has_down_payment and plan.down_payment_due_date is not None


def _unpaid_items(plan: PaymentPlan, progress: PaymentProgress) -> list[DueItem]:
    if plan.is_cash:
        if progress.paid:
            return []
        return [DueItem(ITEM_CASH, 1, cash_amount(plan), plan.cash_due_date)]
    if progress.paid:
        return []

    items = []
    if _tracks_down_payment(plan) and not progress.down_payment_paid:
        items.append(
            DueItem(ITEM_DOWN_PAYMENT, 0, Decimal(plan.down_payment), plan.down_payment_due_date)
        )
    for entry in build_dated_schedule(plan):
        if entry.ordinal > progress.installments_paid:
            items.append(DueItem(ITEM_INSTALLMENT, entry.ordinal, entry.amount, entry.due_date))
    return items


def is_fully_paid(plan: PaymentPlan, progress: PaymentProgress) -> bool:
    if plan.is_cash or progress.paid:
        return progress.paid
    if _tracks_down_payment(plan) and not progress.down_payment_paid:
        return False
    return progress.installments_paid >= plan.total_installments


def next_due_item(plan: PaymentPlan, progress: PaymentProgress) -> DueItem | None:
    """The item the payer owes next, or ``None`` when nothing is owed."""
    if is_fully_paid(plan, progress):
        return None
    items = _unpaid_items(plan, progress)
    return items[0] if items else None


# ---------------------------------------------------------------------------
# next_due_date / payment_status
# ---------------------------------------------------------------------------

def next_due_date(plan: PaymentPlan, progress: PaymentProgress, today=None) -> date | None:
    """Due date of the next unpaid item.

    For cash plans this is the configured due date while unpaid. For
    installment plans it is the date of installment ``installments_paid + 1``
    (the down payment first when it has its own due date and is unpaid).
    ``None`` once everything is paid, or when no date can be resolved.
    ``today`` does not change the answer; it is accepted for symmetry with
    the other queries.
    """
    item = next_due_item(plan, progress)
    return item.due_date if item else None


def payment_status(plan: PaymentPlan, progress: PaymentProgress, today) -> str:
    """Return the :class:`PaymentStatus` of ``plan`` on ``today``.

    Comparison is by whole day: a datetime ``today`` is reduced to its date.
    """
    if is_fully_paid(plan, progress):
        return PaymentStatus.PAID

    due = next_due_date(plan, progress)
    if due is not None and due < as_date(today):
        return PaymentStatus.OVERDUE

    if not plan.is_cash:
        started = progress.installments_paid > 0 or (
            _tracks_down_payment(plan) and progress.down_payment_paid
        )
        if started:
            return PaymentStatus.PARTIAL
    return PaymentStatus.PENDING


# ---------------------------------------------------------------------------
# late_interest
# ---------------------------------------------------------------------------

def late_interest(plan: PaymentPlan, progress: PaymentProgress, today, policy: LateInterestPolicy) -> Decimal:
    """Interest owed on the currently due item.

    Zero unless the plan is overdue. Otherwise computed over the whole
    months elapsed since the due date (partial months do not count):

    * simple: ``principal * rate * months``
    * compound: ``principal * ((1 + rate) ** months - 1)``

    ``principal`` is the amount of the item that is due, not the remaining
    balance. The result is rounded half-up to the cent.
    """
    if payment_status(plan, progress, today) != PaymentStatus.OVERDUE:
        return ZERO

    item = next_due_item(plan, progress)
    months = whole_months_between(item.due_date, as_date(today))
    rate = policy.rate
    if months == 0 or rate == 0:
        return ZERO

    simple = policy.compounding == InterestCompounding.SIMPLE
    growth = rate * months if simple else (1 + rate) ** months
    with localcontext() as ctx:
        # Rounding to the cent needs every integer digit of the result.
        ctx.prec = max(ctx.prec, item.amount.adjusted() + growth.adjusted() + 12)
        if simple:
            interest = item.amount * rate * months
        else:
            interest = item.amount * ((1 + rate) ** months - 1)
        interest = interest.quantize(CENT, rounding=ROUND_HALF_UP)
    logger.debug(
        "Late interest %s on %s item %d (%d months, %s)",
        interest, item.kind, item.ordinal, months, policy.compounding,
    )
    return interest


# ---------------------------------------------------------------------------
# register_payment
# ---------------------------------------------------------------------------

def register_payment(plan: PaymentPlan, progress: PaymentProgress) -> PaymentProgress:
    """Confirm payment of the next due item and return the new progress.

    Raises
    ------
    PlanAlreadySettled
        If nothing is left to pay.
    """
    if is_fully_paid(plan, progress):
        raise PlanAlreadySettled()

    if plan.is_cash:
        updated = replace(progress, paid=True)
    elif _tracks_down_payment(plan) and not progress.down_payment_paid:
        updated = replace(progress, down_payment_paid=True)
    else:
        paid_count = progress.installments_paid + 1
        updated = replace(progress, installments_paid=paid_count)

    if not plan.is_cash and is_fully_paid(plan, replace(updated, paid=False)):
        updated = replace(updated, paid=True)

    logger.info(
        "Payment registered: %d/%d installments paid (down payment paid=%s, settled=%s)",
        updated.installments_paid, plan.total_installments,
        updated.down_payment_paid, updated.paid,
    )
    return updated


# ---------------------------------------------------------------------------
# Balances
# ---------------------------------------------------------------------------

def amount_paid(plan: PaymentPlan, progress: PaymentProgress) -> Decimal:
    """Sum of everything confirmed as paid."""
    total = plan_total(plan)
    unpaid = sum((item.amount for item in _unpaid_items(plan, progress)), ZERO)
    if (
        plan.has_down_payment
        and not _tracks_down_payment(plan)
        and not is_fully_paid(plan, progress)
    ):
        # A down payment without its own due date is settled with the plan.
        unpaid += Decimal(plan.down_payment)
    return total - unpaid


def outstanding_balance(plan: PaymentPlan, progress: PaymentProgress) -> Decimal:
    return plan_total(plan) - amount_paid(plan, progress)


def overdue_items(plan: PaymentPlan, progress: PaymentProgress, today) -> list[DueItem]:
    """Every unpaid item whose due date is before ``today``."""
    reference = as_date(today)
    return [
        item for item in _unpaid_items(plan, progress)
        if item.due_date is not None and item.due_date < reference
    ]


def summarize(plan: PaymentPlan, progress: PaymentProgress, today, policy: LateInterestPolicy) -> PaymentSituation:
    item = next_due_item(plan, progress)
    return PaymentSituation(
        status=payment_status(plan, progress, today),
        next_due_date=item.due_date if item else None,
        amount_due=item.amount if item else None,
        late_interest=late_interest(plan, progress, today, policy),
        amount_paid=amount_paid(plan, progress),
        outstanding=outstanding_balance(plan, progress),
        overdue_items=overdue_items(plan, progress, today),
    )


def collection_totals(entries) -> CollectionTotals:
    """Aggregate expected, paid and pending amounts over ``(plan, progress)`` pairs."""
    expected = ZERO
    paid = ZERO
    for plan, progress in entries:
        expected += plan_total(plan)
        paid += amount_paid(plan, progress)
    return CollectionTotals(expected=expected, paid=paid, pending=expected - paid)
