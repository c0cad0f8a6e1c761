"""Snapshot Store — SQLAlchemy implementation of SnapshotRepository.

Invariants:
    - save() upserts the single snapshot row and commits
    - load_latest() returns None when nothing has been saved yet
    - SQLAlchemy failures surface as DatabaseError (via DatabaseSessionManager)

Design Decisions:
    - Takes an AsyncSession per request: the route's session commits the snapshot
      right after the in-memory mutation succeeded
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from onsregistry.models.registry_snapshot import RegistrySnapshot, SNAPSHOT_ROW_ID

logger = logging.getLogger(__name__)


class RegistrySnapshotStore:
    """Persists registry snapshots in the registry_snapshots table."""

    def __init__(self, db: AsyncSession):
        self._db = db

    async def load_latest(self) -> dict | None:
        result = await self._db.execute(
            select(RegistrySnapshot).where(RegistrySnapshot.id == SNAPSHOT_ROW_ID),
        )
        row = result.scalar_one_or_none()
        return row.snapshot if row else None

    async def save(self, snapshot: dict) -> None:
        row = await self._db.get(RegistrySnapshot, SNAPSHOT_ROW_ID)
        if row is None:
            row = RegistrySnapshot(id=SNAPSHOT_ROW_ID)
            self._db.add(row)
        row.snapshot = snapshot
        row.gs1_code_count = len(snapshot.get("gs1_codes", []))
        row.ons_record_count = len(snapshot.get("ons_records", []))
        row.service_type_count = len(snapshot.get("service_types", []))
        row.saved_at = datetime.now(timezone.utc)
        await self._db.commit()
        logger.debug(
            f"Registry snapshot saved ({row.gs1_code_count} codes, "
            f"{row.ons_record_count} records, {row.service_type_count} service types)",
        )
