"""ORM Models — SQLAlchemy declarative models for persisted registry state.

Invariants:
    - All models inherit from Base (db/base.py)

Design Decisions:
    - Registry tables persisted as one JSON snapshot row, not one row per entity
      (ADR: the in-memory tables are authoritative; the DB is a restart cache)
    - All models imported here so metadata is complete before create_all / alembic
"""

from onsregistry.models.registry_snapshot import RegistrySnapshot  # noqa: F401
