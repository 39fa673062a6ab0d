# backend/settings/test.py
"""
PATH: backend/settings/test.py

TEST SETTINGS
Used by pytest-django (see pyproject.toml) and by `manage.py test`.
"""

from __future__ import annotations

from .base import *  # noqa: F403

DEBUG = False

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"

NOTIFICATIONS = {"ASYNC": False}

CATALOG = {
    "NEAR_EXPIRY_DAYS": 7,
    "NEAR_EXPIRY_DISCOUNT_PERCENT": "20",
    "NEAR_EXPIRY_SWEEP_TIME": "00:00",
    "EXPIRY_SCHEDULER_AUTOSTART": False,
    "LOW_STOCK_THRESHOLD": 10,
}

# Throttle history lives in the cache; keep tests independent of each other
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.dummy.DummyCache",
    }
}
