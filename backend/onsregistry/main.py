"""ONS Registry API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map OnsRegistryError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Registry built once on startup; restored from the stored snapshot when
      persistence is enabled

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Database only initialized when persist_snapshots is on: the in-memory
      registry has no other IO
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from onsregistry.api.dependencies import build_registry, set_registry
from onsregistry.api.error_handlers import register_error_handlers
from onsregistry.api.routes import (
    events, gs1_codes, health, ons_records, service_types,
)
from onsregistry.config import get_settings
from onsregistry.infrastructure import database
from onsregistry.infrastructure.observability import setup_logging
from onsregistry.infrastructure.snapshot_store import RegistrySnapshotStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    snapshot = None
    if settings.persist_snapshots:
        database.init_db(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )
        if settings.database_url.startswith("sqlite"):
            await database.db_manager.create_schema()
        async with database.db_manager.session() as db:
            snapshot = await RegistrySnapshotStore(db).load_latest()
    registry = build_registry(settings, snapshot)
    set_registry(registry)
    logger.info(
        f"ONS registry API started ({registry.get_gs1_code_count()} codes, "
        f"{registry.get_ons_record_count()} records, "
        f"{registry.get_service_type_count()} service types)",
    )
    yield
    if database.db_manager:
        await database.db_manager.engine.dispose()
    logger.info("ONS registry API shutting down")


app = FastAPI(
    title="ONS Registry API", version="1.0.0", lifespan=lifespan,
)

# CORS from settings
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes, registered explicitly
app.include_router(health.router)
app.include_router(gs1_codes.router)
app.include_router(ons_records.router)
app.include_router(service_types.router)
app.include_router(events.router)

register_error_handlers(app)
