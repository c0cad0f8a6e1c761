"""Root conftest — shared test configuration."""

import os

# Ensure tests never reach a real database
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault("PERSIST_SNAPSHOTS", "false")
os.environ.setdefault("OWNER_ID", "owner")
