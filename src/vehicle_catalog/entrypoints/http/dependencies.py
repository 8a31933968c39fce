"""
Dependency injection for FastAPI routes.

Key principle: Database sessions should be per-request, not cached.
App-scoped state (snapshot cache, filter engine, in-memory catalog) lives on
app.state and is created by build_app().
"""

from __future__ import annotations

from typing import Generator

from fastapi import Depends, Request

from vehicle_catalog.adapters.cached_vehicle_catalog_repository import (
    CachedVehicleCatalogRepository,
)
from vehicle_catalog.adapters.postgres_vehicle_catalog_repository import (
    PostgresVehicleCatalogRepository,
)
from vehicle_catalog.infra.config.settings import Settings
from vehicle_catalog.infra.db.session import get_session
from vehicle_catalog.ports.query_parser import QueryParser
from vehicle_catalog.ports.vehicle_catalog_repository import VehicleCatalogRepository
from vehicle_catalog.use_cases.browse_listings import BrowseListings
from vehicle_catalog.use_cases.filter_engine import FilterEngine
from vehicle_catalog.use_cases.get_filter_options import GetFilterOptions


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_filter_engine(request: Request) -> FilterEngine:
    """The engine (and its memo) is shared by every request of one app."""
    return request.app.state.filter_engine


def get_query_parser(request: Request) -> QueryParser | None:
    """None unless the free-text parser is enabled for this app."""
    return request.app.state.query_parser


def get_catalog_repository(request: Request) -> Generator[VehicleCatalogRepository, None, None]:
    """
    Provides the catalog source for a single request.

    - An app built with a fixed repository (in-memory source, tests) always
      gets that repository
    - Otherwise a per-request database session backs a Postgres repository,
      fronted by the app's snapshot cache

    The session is committed/rolled back and closed when the request ends.

    Yields:
        VehicleCatalogRepository: Catalog source for this request
    """
    state = request.app.state
    if state.catalog_repository is not None:
        yield state.catalog_repository
        return

    with get_session() as session:
        yield CachedVehicleCatalogRepository(
            primary_repository=PostgresVehicleCatalogRepository(session=session),
            cache=state.catalog_cache,
        )


def get_browse_listings_use_case(
    repository: VehicleCatalogRepository = Depends(get_catalog_repository),
    engine: FilterEngine = Depends(get_filter_engine),
    settings: Settings = Depends(get_settings),
    query_parser: QueryParser | None = Depends(get_query_parser),
) -> BrowseListings:
    """
    Factory function that returns a configured BrowseListings use case.

    Called per-request; only the engine is shared between requests.
    """
    return BrowseListings(
        vehicle_catalog_repository=repository,
        engine=engine,
        page_size=settings.page_size,
        query_parser=query_parser,
    )


def get_filter_options_use_case(
    repository: VehicleCatalogRepository = Depends(get_catalog_repository),
) -> GetFilterOptions:
    return GetFilterOptions(vehicle_catalog_repository=repository)
