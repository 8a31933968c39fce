from __future__ import annotations

from datetime import timedelta

from fastapi import FastAPI

from vehicle_catalog.adapters.cached_vehicle_catalog_repository import CatalogSnapshotCache
from vehicle_catalog.adapters.in_memory_vehicle_catalog_repository import (
    InMemoryVehicleCatalogRepository,
)
from vehicle_catalog.adapters.openai_query_parser import OpenAIQueryParser
from vehicle_catalog.entrypoints.http.exception_handlers import register_exception_handlers
from vehicle_catalog.entrypoints.http.routes.health import router as health_router
from vehicle_catalog.entrypoints.http.routes.vehicles import router as vehicles_router
from vehicle_catalog.infra.config.settings import Settings, get_settings
from vehicle_catalog.infra.logging_config import configure_logging
from vehicle_catalog.infra.sample_catalog import generate_vehicles
from vehicle_catalog.ports.query_parser import QueryParser
from vehicle_catalog.ports.vehicle_catalog_repository import VehicleCatalogRepository
from vehicle_catalog.use_cases.filter_engine import FilterEngine, utc_now


def _default_repository(settings: Settings) -> VehicleCatalogRepository | None:
    """In-memory source gets sample listings; Postgres is resolved per request."""
    if settings.catalog_source == "postgres":
        return None
    if settings.catalog_source != "in_memory":
        raise ValueError(f"Unknown catalog source: {settings.catalog_source!r}")
    return InMemoryVehicleCatalogRepository(generate_vehicles(settings.sample_catalog_size))


def _default_query_parser(settings: Settings) -> QueryParser | None:
    if not settings.llm_enabled:
        return None
    return OpenAIQueryParser(
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        timeout_seconds=settings.openai_timeout_seconds,
    )


def build_app(
    settings: Settings | None = None,
    repository: VehicleCatalogRepository | None = None,
    query_parser: QueryParser | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Vehicle Catalog API",
        description="""
        Vehicle listings API: filter, rank and page through the catalog.

        ## Features
        - Browse listings with cascading filters
        - Promoted listings ranked first
        - Incremental reveal (12 per page)
        - Filter choices scoped to the current selection
        - Optional free-text search (OpenAI), degrading to plain filters on failure

        ## Authentication
        Currently no authentication required (development phase).

        ## Error Handling
        All errors return structured JSON responses with error codes.
        See the error response schemas in the API documentation.
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # App-scoped state, one per app instance
    app.state.settings = settings
    app.state.catalog_repository = repository or _default_repository(settings)
    app.state.catalog_cache = CatalogSnapshotCache(
        clock=utc_now,
        ttl=timedelta(seconds=settings.catalog_cache_ttl_seconds),
    )
    app.state.filter_engine = FilterEngine(clock=utc_now)
    app.state.query_parser = query_parser or _default_query_parser(settings)

    # Register global exception handlers
    register_exception_handlers(app)

    # Register routers
    app.include_router(health_router)
    app.include_router(vehicles_router, prefix="/v1")

    return app


app = build_app()
