"""Registry Snapshot ORM — persists the whole registry as one JSON document.

Invariants:
    - Single row (id = 1): each save overwrites the previous snapshot
    - snapshot holds the dict produced by core/registry_snapshot.tables_to_snapshot
    - Counts denormalized for inspection without parsing the JSON

Design Decisions:
    - JSON column over per-entity tables: the in-memory registry is authoritative,
      persistence only needs to survive restarts
"""

from datetime import datetime, timezone

from sqlalchemy import Integer, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from onsregistry.db.base import Base

SNAPSHOT_ROW_ID: int = 1


class RegistrySnapshot(Base):
    """Latest persisted registry state."""
    __tablename__ = "registry_snapshots"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    snapshot: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    gs1_code_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    ons_record_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    service_type_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    saved_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
