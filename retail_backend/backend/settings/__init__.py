# backend/settings/__init__.py
"""
PATH: backend/settings/__init__.py

Settings package entrypoint.

Nothing is imported here. Use DJANGO_SETTINGS_MODULE to select:
- backend.settings.dev   (local development)
- backend.settings.prod  (production)
- backend.settings.test  (test runs: in-memory SQLite, side effects on)
"""
