from datetime import date

from payment_plans.reminders import days_until_due, is_collection_day, needs_reminder
from payment_plans.types import PaymentProgress


class TestReminders:
    def test_days_until_due(self, monthly_plan):
        progress = PaymentProgress(installments_paid=2)
        assert days_until_due(monthly_plan, progress, date(2024, 3, 7)) == 3
        assert days_until_due(monthly_plan, progress, date(2024, 3, 12)) == -2

    def test_reminder_window(self, monthly_plan):
        progress = PaymentProgress(installments_paid=2)
        assert needs_reminder(monthly_plan, progress, date(2024, 3, 7))
        assert needs_reminder(monthly_plan, progress, date(2024, 3, 9))
        assert not needs_reminder(monthly_plan, progress, date(2024, 3, 6))

    def test_no_reminder_on_or_after_due_date(self, monthly_plan):
        progress = PaymentProgress(installments_paid=2)
        assert not needs_reminder(monthly_plan, progress, date(2024, 3, 10))
        assert not needs_reminder(monthly_plan, progress, date(2024, 3, 11))

    def test_window_from_argument(self, monthly_plan):
        progress = PaymentProgress(installments_paid=2)
        assert needs_reminder(monthly_plan, progress, date(2024, 3, 3), days_before=7)

    def test_window_from_settings(self, settings, monthly_plan):
        settings.PAYMENT_REMINDER_DAYS_BEFORE = 5
        progress = PaymentProgress(installments_paid=2)
        assert needs_reminder(monthly_plan, progress, date(2024, 3, 5))

    def test_paid_plan_needs_no_reminder(self, monthly_plan):
        progress = PaymentProgress(installments_paid=12, paid=True)
        assert days_until_due(monthly_plan, progress, date(2024, 3, 7)) is None
        assert not needs_reminder(monthly_plan, progress, date(2024, 3, 7))


class TestCollectionDay:
    def test_first_notice_the_day_after(self):
        due = date(2024, 3, 10)
        assert not is_collection_day(due, date(2024, 3, 10))
        assert is_collection_day(due, date(2024, 3, 11))

    def test_monthly_after_first_notice(self):
        due = date(2024, 3, 10)
        assert not is_collection_day(due, date(2024, 4, 10))
        assert is_collection_day(due, date(2024, 4, 11))

    def test_clamped_in_short_month(self):
        due = date(2024, 1, 30)
        assert not is_collection_day(due, date(2024, 2, 28))
        assert is_collection_day(due, date(2024, 2, 29))
        assert not is_collection_day(due, date(2024, 3, 30))
        assert is_collection_day(due, date(2024, 3, 31))

    def test_offset_from_argument(self):
        assert is_collection_day(date(2024, 3, 10), date(2024, 3, 10), days_after=0)
        assert not is_collection_day(date(2024, 3, 10), date(2024, 3, 12), days_after=5)
