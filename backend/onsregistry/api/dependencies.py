"""API Dependencies — registry instance, caller identity and snapshot store for routes.

Invariants:
    - Exactly one OnsRegistry per process (module-level, replaced only via set_registry)
    - Caller identity comes from the X-Caller-Id header, defaulting to "anonymous"
    - get_snapshot_store yields None when persistence is disabled (no DB touched)
    - A persisted mutation and its snapshot save succeed together or not at all:
      registry_write restores the prior tables when the save fails
    - Path keys go through the same validate_key as request bodies

Design Decisions:
    - Module-level registry: deliberate exception to no-global-state rule
      (ADR: single-process uvicorn; the registry is the in-memory source of truth)
    - Lazy construction in get_registry so routes work without the lifespan
      having run (httpx ASGITransport does not send lifespan events)
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator

from fastapi import Header

from onsregistry.config import Settings, get_settings
from onsregistry.core.access_gate import StaticAccessGate
from onsregistry.core.domain_types import ANONYMOUS_CALLER, CallerId, EntityKey
from onsregistry.core.errors import FieldValidationError
from onsregistry.core.registry_events import RegistryEventLog
from onsregistry.core.repository_protocols import SnapshotRepository
from onsregistry.infrastructure.snapshot_store import RegistrySnapshotStore
from onsregistry.schemas.registry import validate_key
from onsregistry.services.ons_registry import OnsRegistry

logger = logging.getLogger(__name__)

_registry: OnsRegistry | None = None
_write_lock = asyncio.Lock()


def build_registry(settings: Settings, snapshot: dict | None = None) -> OnsRegistry:
    """Construct a registry from settings, optionally restoring a snapshot."""
    gate = StaticAccessGate(
        owner=CallerId(settings.owner_id),
        authorizers=frozenset(CallerId(a) for a in settings.authorizers),
    )
    return OnsRegistry.from_snapshot(
        snapshot, gate,
        event_log=RegistryEventLog(settings.event_log_capacity),
        require_authorized_writers=settings.require_authorized_writers,
    )


def set_registry(registry: OnsRegistry | None) -> None:
    global _registry
    _registry = registry


def get_registry() -> OnsRegistry:
    """FastAPI dependency for the process-wide registry."""
    global _registry
    if _registry is None:
        _registry = build_registry(get_settings())
    return _registry


def get_caller(
    x_caller_id: str = Header(ANONYMOUS_CALLER, alias="X-Caller-Id"),
) -> CallerId:
    return CallerId(x_caller_id.strip() or ANONYMOUS_CALLER)


async def get_snapshot_store() -> AsyncGenerator[SnapshotRepository | None, None]:
    """FastAPI dependency for snapshot persistence (None when disabled)."""
    if not get_settings().persist_snapshots:
        yield None
        return
    from onsregistry.infrastructure.database import db_manager

    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield RegistrySnapshotStore(session)


def get_path_key(key: str) -> EntityKey:
    """Path `{key}` normalized the same way request bodies are."""
    try:
        return EntityKey(validate_key(key))
    except ValueError as e:
        raise FieldValidationError(str(e), "key") from e


@asynccontextmanager
async def registry_write(
    registry: OnsRegistry, store: SnapshotRepository | None,
) -> AsyncIterator[None]:
    """Run one mutation and persist it, or undo it if the snapshot save fails."""
    if store is None:
        yield
        return
    async with _write_lock:
        before = registry.to_snapshot()
        last_sequence = registry.events.last_sequence
        yield
        try:
            await store.save(registry.to_snapshot())
        except Exception:
            logger.error("Snapshot save failed, rolling back the registry mutation")
            registry.restore(before, events_after=last_sequence)
            raise
