"""Root conftest — shared test configuration."""

import os

# Ensure tests never talk to a real database or error tracker
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault("REPORTERS", '["log"]')
