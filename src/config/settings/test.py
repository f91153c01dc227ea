"""Test settings - uses in-memory SQLite and no log file."""
import os

os.environ.setdefault("DEBUG", "True")
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")

from .base import *  # noqa: E402,F401,F403

DEBUG = True

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}
DATABASES["default"]["ATOMIC_REQUESTS"] = False

# Faster password hashing in tests
PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
    }
}

# Disable API throttling in tests for deterministic runs
REST_FRAMEWORK["DEFAULT_THROTTLE_CLASSES"] = []  # noqa: F405
REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"] = {}  # noqa: F405

# Fixed engine config so tests do not depend on a local .env
CURRENCY_SYMBOL = "R$"
PAYMENT_PLAN_TOLERANCE = Decimal("0.01")  # noqa: F405
PAYMENT_PLAN_DEFAULT_DUE_DAY = 15
PAYMENT_PLAN_DEFAULT_COMPOUNDING = "composto"
PAYMENT_REMINDER_DAYS_BEFORE = 3
PAYMENT_COLLECTION_DAYS_AFTER = 1

# Disable logging noise during tests
LOGGING["handlers"].pop("file")  # noqa: F405
LOGGING["root"]["level"] = "WARNING"  # noqa: F405
LOGGING["loggers"]["leilao"]["handlers"] = ["console"]  # noqa: F405
LOGGING["loggers"]["leilao"]["level"] = "WARNING"  # noqa: F405
