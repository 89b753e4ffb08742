"""Root conftest — shared test configuration."""

import os

# Ensure tests never talk to a real identity provider or database
os.environ.setdefault("JWT_SECRET", "test-secret-for-portal-tests")
os.environ.setdefault("JWT_AUDIENCE", "authenticated")
os.environ.setdefault("IDENTITY_PROVIDER_URL", "http://idp.test")
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
