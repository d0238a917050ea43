# backend/settings/test.py
"""
PATH: backend/settings/test.py

TEST SETTINGS

- In-memory SQLite (fast, isolated)
- Fast password hashing
- Throttling off so API tests are not rate limited
- SMS gateway left unconfigured; tests patch the transport explicitly
"""

from __future__ import annotations

from .base import *  # noqa: F403
from .base import REST_FRAMEWORK

DEBUG = False

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

REST_FRAMEWORK = {
    **REST_FRAMEWORK,
    "DEFAULT_THROTTLE_CLASSES": (),
}

SALES_REFUND_LIMIT_POLICY = "total"
SALES_SIDE_EFFECTS_ENABLED = True
COMPANY_NAME = "Test Retail"

SMS_GATEWAY = {
    "URL": "",
    "USER_ID": "",
    "API_KEY": "",
    "SENDER_ID": "",
    "TIMEOUT_SECONDS": 5,
}
