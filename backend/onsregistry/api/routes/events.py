"""Event Routes — read-only view of the mutation notification log.

Invariants:
    - Events returned oldest first, strictly after `since`
    - Reading events never mutates the registry
"""

from fastapi import APIRouter, Depends, Query

from onsregistry.api.dependencies import get_registry
from onsregistry.schemas.registry import RegistryEventResponse
from onsregistry.services.ons_registry import OnsRegistry

router = APIRouter(prefix="/api/v1/events", tags=["events"])


@router.get("")
async def list_events(
    since: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    registry: OnsRegistry = Depends(get_registry),
):
    """Creation/deletion notifications after sequence `since`."""
    events = registry.events_since(since, limit)
    return {
        "events": [RegistryEventResponse.from_event(e) for e in events],
        "last_sequence": registry.events.last_sequence,
    }
