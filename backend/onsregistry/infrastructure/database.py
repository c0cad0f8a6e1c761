"""Database Session Manager — async engine and sessions for the snapshot table.

Invariants:
    - Every session rolls back on exception, so a failed snapshot save leaves the
      previously stored snapshot in place
    - SQLAlchemy exceptions surface as DatabaseError (core/errors.py), never raw
    - Pool sizing applies to server databases only; SQLite URLs use the dialect's
      default pool

Design Decisions:
    - Module-level db_manager set by init_db from the FastAPI lifespan, and only
      when persist_snapshots is on (ADR: no global import side effects)
    - expire_on_commit=False: the snapshot row is read after commit for logging
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)

from onsregistry.core.errors import DatabaseError

logger = logging.getLogger(__name__)


def _engine_options(database_url: str, pool_size: int, max_overflow: int) -> dict:
    if database_url.startswith("sqlite"):
        return {}
    return {
        "pool_size": pool_size,
        "max_overflow": max_overflow,
        "pool_pre_ping": True,
        "pool_recycle": 3600,
    }


class DatabaseSessionManager:
    """Owns the engine backing RegistrySnapshotStore."""

    def __init__(
        self, database_url: str, pool_size: int = 5, max_overflow: int = 5,
    ):
        self.engine = create_async_engine(
            database_url, **_engine_options(database_url, pool_size, max_overflow),
        )
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Session with rollback and DatabaseError mapping on failure."""
        session = self._session_factory()
        try:
            yield session
        except IntegrityError as e:
            await session.rollback()
            logger.error(f"Snapshot integrity error: {e}")
            raise DatabaseError("Integrity constraint violated", "snapshot save")
        except OperationalError as e:
            await session.rollback()
            logger.error(f"Snapshot DB operational error: {e}")
            raise DatabaseError("Connection or operational error", "snapshot access")
        except DBAPIError as e:
            await session.rollback()
            logger.error(f"Snapshot DB driver error: {e}")
            raise DatabaseError("Database driver error", "snapshot access")
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"Snapshot SQLAlchemy error: {e}")
            raise DatabaseError("Database operation failed", "snapshot access")
        finally:
            await session.close()

    async def create_schema(self) -> None:
        """Create the snapshot table if missing (SQLite / local runs without alembic)."""
        from onsregistry.db.base import Base
        import onsregistry.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def health_check(self) -> bool:
        """Readiness check: can the snapshot database answer a query."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except DatabaseError as e:
            logger.error(f"DB health check failed: {e.message}")
            return False


db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager
