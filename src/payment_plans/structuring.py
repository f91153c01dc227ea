"""Installment structuring: turn a unit value and a weight mix into a schedule.

These functions are pure. They do not validate their input (see
:mod:`payment_plans.validation`), so their output can always be traced back
to the arguments it was computed from.
"""
from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal

from payment_plans.dates import installment_due_date
from payment_plans.types import (
    DatedScheduleEntry,
    InstallmentWeightCounts,
    PaymentPlan,
    ScheduleEntry,
)

logger = logging.getLogger("leilao")

CENT = Decimal("0.01")

# Emission order of the schedule: triples, then doubles, then simples.
_WEIGHT_ORDER = (
    (3, "triple"),
    (2, "double"),
    (1, "simple"),
)


# ---------------------------------------------------------------------------
# total_weighted_factor / total_amount
# ---------------------------------------------------------------------------

def total_weighted_factor(counts: InstallmentWeightCounts) -> Decimal:
    """Return ``triple*3 + double*2 + simple*1``."""
    return Decimal(counts.triple * 3 + counts.double * 2 + counts.simple)


def total_amount(unit_value, counts: InstallmentWeightCounts) -> Decimal:
    """Return the schedule's sum ("valor total das parcelas")."""
    return Decimal(unit_value) * total_weighted_factor(counts)


def cash_amount(plan: PaymentPlan) -> Decimal:
    """Single amount owed by a cash plan: unit value times the multiplier."""
    unit = Decimal(plan.unit_value or 0)
    if plan.multiplier_factor is None:
        return unit
    return unit * Decimal(str(plan.multiplier_factor))


def plan_total(plan: PaymentPlan) -> Decimal:
    """Everything the plan collects: installments plus down payment, or the cash amount."""
    if plan.is_cash:
        return cash_amount(plan)
    total = total_amount(plan.unit_value or 0, plan.counts)
    if plan.has_down_payment:
        total += Decimal(plan.down_payment)
    return total


# ---------------------------------------------------------------------------
# build_schedule
# ---------------------------------------------------------------------------

def build_schedule(unit_value, counts: InstallmentWeightCounts) -> list[ScheduleEntry]:
    """Build the ordered list of installments.

    Parameters
    ----------
    unit_value : Decimal
        Amount of one simple installment.
    counts : InstallmentWeightCounts
        Declared mix of triple/double/simple installments.

    Returns
    -------
    list[ScheduleEntry]
        ``counts.triple`` entries of weight 3, then ``counts.double`` of
        weight 2, then ``counts.simple`` of weight 1, numbered from 1.
        Empty when no installment is declared.
    """
    unit = Decimal(unit_value)
    schedule = []
    ordinal = 1
    for weight, attr in _WEIGHT_ORDER:
        for _ in range(getattr(counts, attr)):
            schedule.append(ScheduleEntry(ordinal=ordinal, weight=weight, amount=unit * weight))
            ordinal += 1
    logger.debug(
        "Built schedule with %d installments (unit=%s, factor=%s)",
        len(schedule), unit, total_weighted_factor(counts),
    )
    return schedule


def build_dated_schedule(plan: PaymentPlan) -> list[DatedScheduleEntry]:
    """Pair every installment of ``plan`` with its due date.

    Due dates are ``None`` when the plan has no start month yet.
    """
    if plan.unit_value is None:
        return []
    dated = []
    for entry in build_schedule(plan.unit_value, plan.counts):
        due = None
        if plan.start_month is not None:
            due = installment_due_date(plan.start_month, plan.due_day, entry.ordinal)
        dated.append(
            DatedScheduleEntry(
                ordinal=entry.ordinal,
                weight=entry.weight,
                amount=entry.amount,
                due_date=due,
            )
        )
    return dated


# ---------------------------------------------------------------------------
# Bid totals
# ---------------------------------------------------------------------------

def bid_total(bid_value, factor, commission_percent=0) -> Decimal:
    """Total owed for a bid: ``bid * factor * (1 + commission/100)``, to the cent.

    Returns zero when the bid or the factor is not positive, as an
    unfinished form has no total yet.
    """
    bid = Decimal(str(bid_value or 0))
    multiplier = Decimal(str(factor or 0))
    if bid <= 0 or multiplier <= 0:
        return Decimal("0.00")
    base = bid * multiplier
    commission = Decimal(str(commission_percent or 0))
    if commission > 0:
        base = base * (1 + commission / Decimal("100"))
    return base.quantize(CENT, rounding=ROUND_HALF_UP)


def unit_value_for_total(total, counts: InstallmentWeightCounts) -> Decimal | None:
    """Return the unit value that spreads ``total`` over the declared mix.

    ``None`` when the mix declares no installment at all.
    """
    factor = total_weighted_factor(counts)
    if factor == 0:
        return None
    return Decimal(total) / factor
