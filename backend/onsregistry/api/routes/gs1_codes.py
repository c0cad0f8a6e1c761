"""GS1 Code Routes — create, inspect and delete GS1 codes and walk their child records.

Invariants:
    - Creation open to any caller (unless writers are restricted); deletion owner-only
    - A code with child records cannot be deleted (409 REFERENTIAL_INTEGRITY)
    - Snapshot persisted after every successful mutation, never after a failed one;
      a failed save undoes the mutation

Design Decisions:
    - Child listing served by one locked call so count and keys always agree
"""

import logging

from fastapi import APIRouter, Depends, status

from onsregistry.api.dependencies import (
    get_caller, get_path_key, get_registry, get_snapshot_store, registry_write,
)
from onsregistry.core.domain_types import CallerId, EntityKey
from onsregistry.core.repository_protocols import SnapshotRepository
from onsregistry.schemas.registry import GS1CodeCreate, GS1CodeList, GS1CodeResponse
from onsregistry.services.ons_registry import OnsRegistry

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/gs1-codes", tags=["gs1-codes"])


@router.post(
    "", response_model=GS1CodeResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_gs1_code(
    body: GS1CodeCreate,
    caller: CallerId = Depends(get_caller),
    registry: OnsRegistry = Depends(get_registry),
    store: SnapshotRepository | None = Depends(get_snapshot_store),
):
    """Register a new GS1 code."""
    key = EntityKey(body.key)
    async with registry_write(registry, store):
        registry.add_gs1_code(caller, key)
    return GS1CodeResponse(key=key, child_count=0, records=[])


@router.get("", response_model=GS1CodeList)
async def list_gs1_codes(registry: OnsRegistry = Depends(get_registry)):
    """All registered GS1 codes (physical order, not insertion order)."""
    keys = registry.get_gs1_codes()
    return GS1CodeList(count=len(keys), keys=keys)


@router.get("/{key}", response_model=GS1CodeResponse)
async def get_gs1_code(
    key: EntityKey = Depends(get_path_key),
    registry: OnsRegistry = Depends(get_registry),
):
    """A GS1 code and the ONS records that reference it."""
    records = registry.get_gs1_code_children(key)
    return GS1CodeResponse(key=key, child_count=len(records), records=records)


@router.get("/{key}/records/{row}")
async def get_gs1_code_child(
    row: int,
    key: EntityKey = Depends(get_path_key),
    registry: OnsRegistry = Depends(get_registry),
):
    """The ONS record key at position `row` of the code's child set."""
    return {
        "gs1_code": key,
        "row": row,
        "key": registry.get_gs1_code_child_at(key, row),
    }


@router.delete("/{key}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_gs1_code(
    key: EntityKey = Depends(get_path_key),
    caller: CallerId = Depends(get_caller),
    registry: OnsRegistry = Depends(get_registry),
    store: SnapshotRepository | None = Depends(get_snapshot_store),
):
    """Delete a GS1 code that has no remaining ONS records. Owner only."""
    async with registry_write(registry, store):
        registry.delete_gs1_code(caller, key)
