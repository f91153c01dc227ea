"""Payment plan validation.

Two kinds of outcome:

* structurally invalid input (negative counts, missing unit value) raises a
  :class:`~payment_plans.exceptions.PaymentPlanError`; no schedule may be
  built from it;
* a declared mix or total that does not reconcile is only *advisory*: the
  check returns a mismatch object describing it, and the caller decides
  whether to keep an unreconciled draft.

The validator keeps no state and is re-run on every change.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal

from core.currency import format_brl_display
from payment_plans.conf import get_tolerance
from payment_plans.exceptions import InvalidUnitValue, InvalidWeights
from payment_plans.structuring import plan_total, total_amount, total_weighted_factor
from payment_plans.types import InstallmentWeightCounts, PaymentPlan

logger = logging.getLogger("leilao")

OVER = "over"
UNDER = "under"


@dataclass(frozen=True)
class FactorMismatch:
    """The declared triple/double/simple mix does not sum to the multiplier."""

    expected: Decimal
    actual: Decimal
    code: str = "factor_mismatch"

    @property
    def message(self) -> str:
        return (
            f"A soma das parcelas ({self.actual}) nao confere com o "
            f"fator multiplicador ({self.expected})."
        )


@dataclass(frozen=True)
class TotalMismatch:
    """The plan total does not reconcile with the reference amount."""

    expected: Decimal
    actual: Decimal
    difference: Decimal
    direction: str
    code: str = "total_mismatch"

    @property
    def message(self) -> str:
        amount = format_brl_display(abs(self.difference))
        if self.direction == OVER:
            return f"Excede o valor de referencia em {amount}"
        return f"Faltam {amount} para atingir o valor de referencia"


@dataclass(frozen=True)
class InvalidDueDay:
    """A stored due day outside 1..31 that was clamped, not rejected."""

    original: int
    clamped: int
    code: str = "invalid_due_day"

    @property
    def message(self) -> str:
        return (
            f"Dia de vencimento {self.original} fora do intervalo 1-31; "
            f"ajustado para {self.clamped}."
        )


@dataclass(frozen=True)
class Reconciliation:
    factor_mismatch: FactorMismatch | None = None
    total_mismatch: TotalMismatch | None = None
    warnings: tuple = field(default_factory=tuple)

    @property
    def is_reconciled(self) -> bool:
        return self.factor_mismatch is None and self.total_mismatch is None

    @property
    def advisories(self) -> list:
        found = [self.factor_mismatch, self.total_mismatch, *self.warnings]
        return [item for item in found if item is not None]


# ---------------------------------------------------------------------------
# Hard checks
# ---------------------------------------------------------------------------

def _is_count(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def validate_weights(counts: InstallmentWeightCounts) -> None:
    """Reject negative, boolean or non-integer installment counts.

    Raises
    ------
    InvalidWeights
    """
    invalid = {
        name: getattr(counts, name)
        for name in ("triple", "double", "simple")
        if not _is_count(getattr(counts, name))
    }
    if invalid:
        raise InvalidWeights(**invalid)


def validate_unit_value(unit_value) -> None:
    """Reject a missing or non-positive installment unit value.

    Raises
    ------
    InvalidUnitValue
    """
    if unit_value is None or Decimal(unit_value) <= 0:
        raise InvalidUnitValue(unit_value=unit_value)


# ---------------------------------------------------------------------------
# Advisory checks
# ---------------------------------------------------------------------------

def validate_factor_match(counts, multiplier_factor, tolerance=None) -> FactorMismatch | None:
    """Check that the weighted mix sums to the declared multiplier.

    Returns ``None`` when ``|3t + 2d + s - multiplier| <= tolerance``,
    otherwise a :class:`FactorMismatch` (expected = declared multiplier,
    actual = computed factor).
    """
    tolerance = get_tolerance() if tolerance is None else Decimal(str(tolerance))
    expected = Decimal(str(multiplier_factor))
    actual = total_weighted_factor(counts)
    if abs(actual - expected) <= tolerance:
        return None
    logger.debug("Factor mismatch: declared %s, computed %s", expected, actual)
    return FactorMismatch(expected=expected, actual=actual)


def validate_total_against_reference(
    unit_value,
    counts,
    down_payment,
    reference_amount,
    tolerance=None,
) -> TotalMismatch | None:
    """Check that installments plus down payment add up to the reference.

    Parameters
    ----------
    unit_value : Decimal
    counts : InstallmentWeightCounts
    down_payment : Decimal or None
        Treated as zero when absent.
    reference_amount : Decimal
        Sponsorship pledge or bid value the plan must match.
    tolerance : Decimal, optional
        Defaults to ``settings.PAYMENT_PLAN_TOLERANCE``.

    Returns
    -------
    TotalMismatch or None
        ``difference`` is ``actual - expected``; ``direction`` tells whether
        the plan exceeds (``"over"``) or falls short of (``"under"``) the
        reference.
    """
    actual = total_amount(unit_value, counts) + Decimal(down_payment or 0)
    return _compare_total(actual, reference_amount, tolerance)


def _compare_total(actual, reference_amount, tolerance=None) -> TotalMismatch | None:
    tolerance = get_tolerance() if tolerance is None else Decimal(str(tolerance))
    expected = Decimal(reference_amount)
    difference = actual - expected
    if abs(difference) <= tolerance:
        return None
    logger.debug("Total mismatch: reference %s, plan %s", expected, actual)
    return TotalMismatch(
        expected=expected,
        actual=actual,
        difference=difference,
        direction=OVER if difference > 0 else UNDER,
    )


# ---------------------------------------------------------------------------
# reconcile
# ---------------------------------------------------------------------------

def reconcile(plan: PaymentPlan, reference_amount=None, tolerance=None, warnings=()) -> Reconciliation:
    """Run every check against ``plan``.

    The weight and unit value checks raise; factor and total checks are
    collected. The total check is skipped when no reference amount is known,
    and the factor check when no multiplier was declared. A cash plan has no
    installment mix: its single amount is compared to the reference.
    """
    validate_weights(plan.counts)
    validate_unit_value(plan.unit_value)

    factor_mismatch = None
    if plan.multiplier_factor is not None and not plan.is_cash:
        factor_mismatch = validate_factor_match(plan.counts, plan.multiplier_factor, tolerance)

    total_mismatch = None
    if reference_amount is not None and plan.is_cash:
        total_mismatch = _compare_total(plan_total(plan), reference_amount, tolerance)
    elif reference_amount is not None:
        down_payment = plan.down_payment if plan.has_down_payment else None
        total_mismatch = validate_total_against_reference(
            plan.unit_value, plan.counts, down_payment, reference_amount, tolerance,
        )

    result = Reconciliation(
        factor_mismatch=factor_mismatch,
        total_mismatch=total_mismatch,
        warnings=tuple(warnings),
    )
    if not result.is_reconciled:
        logger.warning(
            "Payment plan not reconciled: %s",
            "; ".join(item.message for item in result.advisories),
        )
    return result
