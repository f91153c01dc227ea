"""Engine configuration read from Django settings."""
from decimal import Decimal

from django.conf import settings

DEFAULT_TOLERANCE = Decimal("0.01")
DEFAULT_DUE_DAY = 15
DEFAULT_COMPOUNDING = "composto"
DEFAULT_REMINDER_DAYS_BEFORE = 3
DEFAULT_COLLECTION_DAYS_AFTER = 1


def get_tolerance() -> Decimal:
    """Reconciliation tolerance, in currency units."""
    return Decimal(str(getattr(settings, "PAYMENT_PLAN_TOLERANCE", DEFAULT_TOLERANCE)))


def get_default_due_day() -> int:
    return int(getattr(settings, "PAYMENT_PLAN_DEFAULT_DUE_DAY", DEFAULT_DUE_DAY))


def get_default_compounding() -> str:
    return getattr(settings, "PAYMENT_PLAN_DEFAULT_COMPOUNDING", DEFAULT_COMPOUNDING)


def get_reminder_days_before() -> int:
    return int(getattr(settings, "PAYMENT_REMINDER_DAYS_BEFORE", DEFAULT_REMINDER_DAYS_BEFORE))


def get_collection_days_after() -> int:
    return int(getattr(settings, "PAYMENT_COLLECTION_DAYS_AFTER", DEFAULT_COLLECTION_DAYS_AFTER))
