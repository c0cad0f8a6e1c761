"""ONS Record Routes — create, read and delete resolution records.

Invariants:
    - Creation requires the parent GS1 code to exist (404 otherwise, nothing stored)
    - The service type key is stored as given, never checked against service types
    - Records are immutable: there is no PUT/PATCH
    - Deletion owner-only; removes the record from its parent code's child set too
"""

from fastapi import APIRouter, Depends, status

from onsregistry.api.dependencies import (
    get_caller, get_path_key, get_registry, get_snapshot_store, registry_write,
)
from onsregistry.core.domain_types import CallerId, EntityKey
from onsregistry.core.repository_protocols import SnapshotRepository
from onsregistry.schemas.registry import (
    ONSRecordCreate, ONSRecordList, ONSRecordResponse,
)
from onsregistry.services.ons_registry import OnsRegistry

router = APIRouter(prefix="/api/v1/ons-records", tags=["ons-records"])


@router.post(
    "", response_model=ONSRecordResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_ons_record(
    body: ONSRecordCreate,
    caller: CallerId = Depends(get_caller),
    registry: OnsRegistry = Depends(get_registry),
    store: SnapshotRepository | None = Depends(get_snapshot_store),
):
    """Register an ONS record under an existing GS1 code."""
    async with registry_write(registry, store):
        record = registry.add_ons_record(
            caller,
            EntityKey(body.key),
            EntityKey(body.gs1_code),
            body.flags,
            EntityKey(body.service_type),
            body.pattern,
        )
    return ONSRecordResponse.from_record(record)


@router.get("", response_model=ONSRecordList)
async def list_ons_records(registry: OnsRegistry = Depends(get_registry)):
    keys = registry.get_ons_records()
    return ONSRecordList(count=len(keys), keys=keys)


@router.get("/{key}", response_model=ONSRecordResponse)
async def get_ons_record(
    key: EntityKey = Depends(get_path_key),
    registry: OnsRegistry = Depends(get_registry),
):
    return ONSRecordResponse.from_record(registry.get_ons_record(key))


@router.delete("/{key}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_ons_record(
    key: EntityKey = Depends(get_path_key),
    caller: CallerId = Depends(get_caller),
    registry: OnsRegistry = Depends(get_registry),
    store: SnapshotRepository | None = Depends(get_snapshot_store),
):
    """Delete an ONS record and detach it from its GS1 code. Owner only."""
    async with registry_write(registry, store):
        registry.delete_ons_record(caller, key)
