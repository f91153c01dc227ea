from datetime import date, datetime
from decimal import Decimal

import pytest

from payment_plans.exceptions import PlanAlreadySettled
from payment_plans.status import (
    ITEM_DOWN_PAYMENT,
    ITEM_INSTALLMENT,
    amount_paid,
    collection_totals,
    late_interest,
    next_due_date,
    outstanding_balance,
    overdue_items,
    payment_status,
    register_payment,
    summarize,
)
from payment_plans.types import (
    InstallmentWeightCounts,
    InterestCompounding,
    LateInterestPolicy,
    PaymentPlan,
    PaymentPlanKind,
    PaymentProgress,
    PaymentStatus,
)

SIMPLE_2 = LateInterestPolicy(Decimal("2"), InterestCompounding.SIMPLE)
COMPOUND_2 = LateInterestPolicy(Decimal("2"), InterestCompounding.COMPOUND)


class TestInstallmentStatus:
    def test_pending_before_first_due_date(self, monthly_plan, fresh_progress):
        assert payment_status(monthly_plan, fresh_progress, date(2024, 1, 5)) == PaymentStatus.PENDING
        assert next_due_date(monthly_plan, fresh_progress, date(2024, 1, 5)) == date(2024, 1, 10)

    def test_due_today_is_not_overdue(self, monthly_plan, fresh_progress):
        assert payment_status(monthly_plan, fresh_progress, date(2024, 1, 10)) == PaymentStatus.PENDING

    def test_time_of_day_is_ignored(self, monthly_plan, fresh_progress):
        now = datetime(2024, 1, 10, 23, 59)
        assert payment_status(monthly_plan, fresh_progress, now) == PaymentStatus.PENDING

    def test_partially_paid(self, monthly_plan):
        progress = PaymentProgress(installments_paid=2)
        assert payment_status(monthly_plan, progress, date(2024, 3, 1)) == PaymentStatus.PARTIAL
        assert next_due_date(monthly_plan, progress) == date(2024, 3, 10)

    def test_overdue_after_some_payments(self, monthly_plan):
        progress = PaymentProgress(installments_paid=2)
        assert payment_status(monthly_plan, progress, date(2024, 4, 15)) == PaymentStatus.OVERDUE

    def test_paid(self, monthly_plan):
        progress = PaymentProgress(installments_paid=12)
        assert payment_status(monthly_plan, progress, date(2030, 1, 1)) == PaymentStatus.PAID
        assert next_due_date(monthly_plan, progress) is None

    def test_same_inputs_same_status(self, monthly_plan):
        progress = PaymentProgress(installments_paid=2)
        today = date(2024, 4, 15)
        assert payment_status(monthly_plan, progress, today) == payment_status(monthly_plan, progress, today)

    def test_paying_more_never_leaves_paid(self, monthly_plan):
        today = date(2026, 1, 1)
        seen_paid = False
        for paid_count in range(13):
            result = payment_status(monthly_plan, PaymentProgress(installments_paid=paid_count), today)
            if seen_paid:
                assert result == PaymentStatus.PAID
            seen_paid = seen_paid or result == PaymentStatus.PAID
        assert seen_paid

    def test_time_alone_never_settles_a_plan(self, monthly_plan):
        progress = PaymentProgress(installments_paid=2)
        assert payment_status(monthly_plan, progress, date(2099, 1, 1)) == PaymentStatus.OVERDUE


class TestLateInterest:
    def test_simple_interest_one_month(self, monthly_plan):
        progress = PaymentProgress(installments_paid=2)
        interest = late_interest(monthly_plan, progress, date(2024, 4, 15), SIMPLE_2)
        assert interest == Decimal("1000.00") * Decimal("0.02")

    def test_compound_interest_three_months(self, monthly_plan):
        progress = PaymentProgress(installments_paid=2)
        interest = late_interest(monthly_plan, progress, date(2024, 6, 10), COMPOUND_2)
        assert interest == Decimal("61.21")

    def test_simple_interest_three_months(self, monthly_plan):
        progress = PaymentProgress(installments_paid=2)
        interest = late_interest(monthly_plan, progress, date(2024, 6, 10), SIMPLE_2)
        assert interest == Decimal("60.00")

    def test_less_than_a_month_late(self, monthly_plan):
        progress = PaymentProgress(installments_paid=2)
        assert late_interest(monthly_plan, progress, date(2024, 3, 20), SIMPLE_2) == Decimal("0")

    def test_not_overdue(self, monthly_plan):
        progress = PaymentProgress(installments_paid=2)
        assert late_interest(monthly_plan, progress, date(2024, 3, 10), SIMPLE_2) == Decimal("0")

    def test_principal_is_the_due_installment(self, installment_plan):
        progress = PaymentProgress(installments_paid=0)
        interest = late_interest(installment_plan, progress, date(2024, 2, 10), SIMPLE_2)
        assert interest == Decimal("60.00")

    def test_zero_rate(self, monthly_plan):
        progress = PaymentProgress(installments_paid=2)
        policy = LateInterestPolicy()
        assert late_interest(monthly_plan, progress, date(2024, 8, 1), policy) == Decimal("0")

    def test_long_overdue_compound_interest_keeps_every_digit(self, fresh_progress):
        plan = PaymentPlan(
            kind=PaymentPlanKind.INSTALLMENTS,
            unit_value=Decimal("1000.00"),
            counts=InstallmentWeightCounts(simple=1),
            due_day=10,
            start_month=date(2000, 1, 1),
        )
        policy = LateInterestPolicy(Decimal("100"), InterestCompounding.COMPOUND)
        interest = late_interest(plan, fresh_progress, date(2026, 1, 1), policy)
        # 311 whole months from 2000-01-10, the rate doubling the principal each month.
        assert interest == 1000 * (2 ** 311 - 1)
        assert interest.as_tuple().exponent == -2


class TestRegisterPayment:
    def test_advances_one_installment(self, monthly_plan, fresh_progress):
        progress = register_payment(monthly_plan, fresh_progress)
        assert progress.installments_paid == 1
        assert not progress.paid
        assert fresh_progress.installments_paid == 0

    def test_last_installment_settles_the_plan(self, monthly_plan):
        progress = register_payment(monthly_plan, PaymentProgress(installments_paid=11))
        assert progress.installments_paid == 12
        assert progress.paid

    def test_nothing_left_to_pay(self, monthly_plan):
        with pytest.raises(PlanAlreadySettled):
            register_payment(monthly_plan, PaymentProgress(installments_paid=12, paid=True))


class TestCashPlan:
    def test_pending_until_due_date(self, cash_plan, fresh_progress):
        assert payment_status(cash_plan, fresh_progress, date(2024, 4, 1)) == PaymentStatus.PENDING
        assert next_due_date(cash_plan, fresh_progress) == date(2024, 5, 1)

    def test_overdue_after_due_date(self, cash_plan, fresh_progress):
        assert payment_status(cash_plan, fresh_progress, date(2024, 5, 2)) == PaymentStatus.OVERDUE

    def test_never_partially_paid(self, cash_plan):
        progress = PaymentProgress(installments_paid=3)
        assert payment_status(cash_plan, progress, date(2024, 4, 1)) == PaymentStatus.PENDING

    def test_confirmation_sets_paid_flag(self, cash_plan, fresh_progress):
        progress = register_payment(cash_plan, fresh_progress)
        assert progress.paid
        assert payment_status(cash_plan, progress, date(2024, 6, 1)) == PaymentStatus.PAID
        assert next_due_date(cash_plan, progress) is None
        assert amount_paid(cash_plan, progress) == Decimal("9000.00")

    def test_interest_on_whole_amount(self, cash_plan, fresh_progress):
        interest = late_interest(cash_plan, fresh_progress, date(2024, 6, 1), SIMPLE_2)
        assert interest == Decimal("180.00")


class TestDownPayment:
    def test_down_payment_comes_first(self, down_payment_plan, fresh_progress):
        assert next_due_date(down_payment_plan, fresh_progress) == date(2023, 12, 20)

    def test_paying_down_payment(self, down_payment_plan, fresh_progress):
        progress = register_payment(down_payment_plan, fresh_progress)
        assert progress.down_payment_paid
        assert progress.installments_paid == 0
        assert next_due_date(down_payment_plan, progress) == date(2024, 1, 10)
        assert payment_status(down_payment_plan, progress, date(2024, 1, 5)) == PaymentStatus.PARTIAL
        assert amount_paid(down_payment_plan, progress) == Decimal("500.00")
        assert outstanding_balance(down_payment_plan, progress) == Decimal("9000.00")

    def test_plan_settles_after_down_payment_and_installments(self, down_payment_plan, fresh_progress):
        progress = fresh_progress
        for _ in range(5):
            progress = register_payment(down_payment_plan, progress)
        assert progress.paid
        assert progress.installments_paid == 4
        assert amount_paid(down_payment_plan, progress) == Decimal("9500.00")

    def test_untracked_down_payment_settles_with_plan(self, mixed_counts, fresh_progress):
        plan = PaymentPlan(
            kind=PaymentPlanKind.DOWN_PAYMENT_PLUS_INSTALLMENTS,
            unit_value=Decimal("1000.00"),
            counts=mixed_counts,
            down_payment=Decimal("500.00"),
            due_day=10,
            start_month=date(2024, 1, 1),
        )
        assert next_due_date(plan, fresh_progress) == date(2024, 1, 10)
        assert amount_paid(plan, fresh_progress) == Decimal("0.00")

        progress = PaymentProgress(installments_paid=3)
        progress = register_payment(plan, progress)
        assert progress.paid
        assert amount_paid(plan, progress) == Decimal("9500.00")

    def test_untracked_down_payment_paid_once_installments_are(self, mixed_counts):
        plan = PaymentPlan(
            kind=PaymentPlanKind.DOWN_PAYMENT_PLUS_INSTALLMENTS,
            unit_value=Decimal("1000.00"),
            counts=mixed_counts,
            down_payment=Decimal("500.00"),
            due_day=10,
            start_month=date(2024, 1, 1),
        )
        progress = PaymentProgress(installments_paid=4)
        assert payment_status(plan, progress, date(2024, 6, 1)) == PaymentStatus.PAID
        assert amount_paid(plan, progress) == Decimal("9500.00")
        assert outstanding_balance(plan, progress) == Decimal("0.00")


class TestBalances:
    def test_overdue_items(self, monthly_plan):
        items = overdue_items(monthly_plan, PaymentProgress(installments_paid=2), date(2024, 4, 15))
        assert [(item.kind, item.ordinal) for item in items] == [
            (ITEM_INSTALLMENT, 3),
            (ITEM_INSTALLMENT, 4),
        ]

    def test_overdue_down_payment_listed(self, down_payment_plan, fresh_progress):
        items = overdue_items(down_payment_plan, fresh_progress, date(2024, 1, 5))
        assert [item.kind for item in items] == [ITEM_DOWN_PAYMENT]

    def test_summarize(self, monthly_plan):
        situation = summarize(
            monthly_plan, PaymentProgress(installments_paid=2), date(2024, 4, 15), SIMPLE_2,
        )
        assert situation.status == PaymentStatus.OVERDUE
        assert situation.next_due_date == date(2024, 3, 10)
        assert situation.amount_due == Decimal("1000.00")
        assert situation.late_interest == Decimal("20.00")
        assert situation.amount_paid == Decimal("2000.00")
        assert situation.outstanding == Decimal("10000.00")
        assert len(situation.overdue_items) == 2

    def test_collection_totals(self, monthly_plan, cash_plan):
        totals = collection_totals([
            (monthly_plan, PaymentProgress(installments_paid=3)),
            (cash_plan, PaymentProgress(paid=True)),
        ])
        assert totals.expected == Decimal("21000.00")
        assert totals.paid == Decimal("12000.00")
        assert totals.pending == Decimal("9000.00")
