"""Typed entities of a payment plan.

Plans are plain immutable values: the owning sponsor/bidder/lot record is
persisted elsewhere, and everything here is rebuilt from its fields.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from django.db import models


class PaymentPlanKind(models.TextChoices):
    CASH = "a_vista", "A vista"
    INSTALLMENTS = "parcelamento", "Parcelamento"
    DOWN_PAYMENT_PLUS_INSTALLMENTS = "entrada_parcelamento", "Entrada + Parcelamento"


class PaymentStatus(models.TextChoices):
    PENDING = "PENDING", "Pendente"
    PARTIAL = "PARTIAL", "Parcialmente pago"
    PAID = "PAID", "Pago"
    OVERDUE = "OVERDUE", "Atrasado"


class InterestCompounding(models.TextChoices):
    SIMPLE = "simples", "Juros simples"
    COMPOUND = "composto", "Juros compostos"


WEIGHT_LABELS = {3: "tripla", 2: "dupla", 1: "simples"}


@dataclass(frozen=True)
class InstallmentWeightCounts:
    """How many triple, double and simple installments a plan declares."""

    triple: int = 0
    double: int = 0
    simple: int = 0

    @property
    def total_installments(self) -> int:
        return self.triple + self.double + self.simple


@dataclass(frozen=True)
class ScheduleEntry:
    ordinal: int
    weight: int
    amount: Decimal

    @property
    def label(self) -> str:
        return WEIGHT_LABELS[self.weight]


@dataclass(frozen=True)
class DatedScheduleEntry:
    ordinal: int
    weight: int
    amount: Decimal
    due_date: date | None

    @property
    def label(self) -> str:
        return WEIGHT_LABELS[self.weight]


@dataclass(frozen=True)
class PaymentPlan:
    """A payment plan as configured on its owning record.

    ``unit_value`` is the amount of one simple (weight 1) installment.
    ``start_month`` is the first day of the month the installments start in.
    """

    kind: str
    unit_value: Decimal | None = None
    multiplier_factor: Decimal | None = None
    counts: InstallmentWeightCounts = field(default_factory=InstallmentWeightCounts)
    down_payment: Decimal | None = None
    due_day: int = 15
    start_month: date | None = None
    cash_due_date: date | None = None
    down_payment_due_date: date | None = None

    @property
    def is_cash(self) -> bool:
        return self.kind == PaymentPlanKind.CASH

    @property
    def has_down_payment(self) -> bool:
        return (
            self.kind == PaymentPlanKind.DOWN_PAYMENT_PLUS_INSTALLMENTS
            and bool(self.down_payment)
        )

    @property
    def total_installments(self) -> int:
        return self.counts.total_installments


@dataclass(frozen=True)
class PaymentProgress:
    """Payment tracking fields; only changed by explicit confirmations."""

    installments_paid: int = 0
    paid: bool = False
    down_payment_paid: bool = False


@dataclass(frozen=True)
class LateInterestPolicy:
    rate_percent_per_month: Decimal = Decimal("0")
    compounding: str = InterestCompounding.COMPOUND

    @property
    def rate(self) -> Decimal:
        return Decimal(self.rate_percent_per_month) / Decimal("100")
