"""Service Type Routes — create, query, annotate and delete service types.

Invariants:
    - Creating an existing key fails (409); deleting a missing key fails (404)
    - ?language= selects one documentation location; an unset language yields null,
      not an error
    - obsoletes / obsoleted_by only ever grow
    - Deleting a service type leaves ONS records that name it untouched
"""

from fastapi import APIRouter, Depends, Query, status

from onsregistry.api.dependencies import (
    get_caller, get_path_key, get_registry, get_snapshot_store, registry_write,
)
from onsregistry.core.domain_types import CallerId, EntityKey
from onsregistry.core.repository_protocols import SnapshotRepository
from onsregistry.schemas.registry import (
    DocumentationUpdate, ServiceTypeCreate, ServiceTypeList,
    ServiceTypeReference, ServiceTypeResponse,
)
from onsregistry.services.ons_registry import OnsRegistry

router = APIRouter(prefix="/api/v1/service-types", tags=["service-types"])


@router.post(
    "", response_model=ServiceTypeResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_service_type(
    body: ServiceTypeCreate,
    caller: CallerId = Depends(get_caller),
    registry: OnsRegistry = Depends(get_registry),
    store: SnapshotRepository | None = Depends(get_snapshot_store),
):
    """Register a service type, optionally with one documentation entry."""
    key = EntityKey(body.key)
    async with registry_write(registry, store):
        registry.add_service_type(
            caller, key,
            is_abstract=body.is_abstract,
            extends=EntityKey(body.extends) if body.extends else None,
            wsdl_uri=body.wsdl_uri,
            homepage_uri=body.homepage_uri,
            language_code=body.language_code,
            location=body.location,
            obsoletes=[EntityKey(k) for k in body.obsoletes],
            obsoleted_by=[EntityKey(k) for k in body.obsoleted_by],
        )
    return ServiceTypeResponse.from_view(
        registry.get_service_type(key, body.language_code),
    )


@router.get("", response_model=ServiceTypeList)
async def list_service_types(registry: OnsRegistry = Depends(get_registry)):
    keys = registry.get_service_types()
    return ServiceTypeList(count=len(keys), keys=keys)


@router.get("/{key}", response_model=ServiceTypeResponse)
async def get_service_type(
    key: EntityKey = Depends(get_path_key),
    language: str | None = Query(None, max_length=35),
    registry: OnsRegistry = Depends(get_registry),
):
    """Service type fields plus the documentation location for `language`."""
    return ServiceTypeResponse.from_view(
        registry.get_service_type(key, language),
    )


@router.put("/{key}/documentation", response_model=ServiceTypeResponse)
async def set_service_type_documentation(
    body: DocumentationUpdate,
    key: EntityKey = Depends(get_path_key),
    caller: CallerId = Depends(get_caller),
    registry: OnsRegistry = Depends(get_registry),
    store: SnapshotRepository | None = Depends(get_snapshot_store),
):
    """Set the documentation location for one language."""
    async with registry_write(registry, store):
        registry.add_service_type_documentation(
            caller, key, body.language_code, body.location,
        )
    return ServiceTypeResponse.from_view(
        registry.get_service_type(key, body.language_code),
    )


@router.post("/{key}/obsoletes", response_model=ServiceTypeResponse)
async def append_obsoletes(
    body: ServiceTypeReference,
    key: EntityKey = Depends(get_path_key),
    caller: CallerId = Depends(get_caller),
    registry: OnsRegistry = Depends(get_registry),
    store: SnapshotRepository | None = Depends(get_snapshot_store),
):
    """Record that this service type obsoletes another."""
    async with registry_write(registry, store):
        registry.add_service_type_obsoletes(caller, key, EntityKey(body.key))
    return ServiceTypeResponse.from_view(registry.get_service_type(key))


@router.post("/{key}/obsoleted-by", response_model=ServiceTypeResponse)
async def append_obsoleted_by(
    body: ServiceTypeReference,
    key: EntityKey = Depends(get_path_key),
    caller: CallerId = Depends(get_caller),
    registry: OnsRegistry = Depends(get_registry),
    store: SnapshotRepository | None = Depends(get_snapshot_store),
):
    """Record that this service type is obsoleted by another."""
    async with registry_write(registry, store):
        registry.add_service_type_obsoleted_by(caller, key, EntityKey(body.key))
    return ServiceTypeResponse.from_view(registry.get_service_type(key))


@router.delete("/{key}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_service_type(
    key: EntityKey = Depends(get_path_key),
    caller: CallerId = Depends(get_caller),
    registry: OnsRegistry = Depends(get_registry),
    store: SnapshotRepository | None = Depends(get_snapshot_store),
):
    """Delete a service type. Owner only."""
    async with registry_write(registry, store):
        registry.delete_service_type(caller, key)
