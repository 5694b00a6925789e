"""Root conftest — shared test configuration."""

import os

# Ensure tests never sign tokens with a production secret or reach a real database
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-unit-tests-only-0123456789")
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///:memory:",
)
os.environ.setdefault("LOG_FORMAT", "text")
