"""
Unit tests for FastAPI dependency functions.

- The catalog repository comes from app state when the app was built with one
- Otherwise a per-request session backs a cached Postgres repository
- Use case factories wire the shared engine and settings
"""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock, Mock, patch

from vehicle_catalog.adapters.cached_vehicle_catalog_repository import (
    CachedVehicleCatalogRepository,
    CatalogSnapshotCache,
)
from vehicle_catalog.adapters.in_memory_vehicle_catalog_repository import (
    InMemoryVehicleCatalogRepository,
)
from vehicle_catalog.entrypoints.http.dependencies import (
    get_browse_listings_use_case,
    get_catalog_repository,
    get_filter_engine,
    get_filter_options_use_case,
    get_query_parser,
)
from vehicle_catalog.infra.config.settings import Settings
from vehicle_catalog.ports.query_parser import QueryParser
from vehicle_catalog.use_cases.browse_listings import BrowseListings
from vehicle_catalog.use_cases.filter_engine import FilterEngine
from vehicle_catalog.use_cases.get_filter_options import GetFilterOptions


def fake_request(**state: object) -> Mock:
    request = Mock()
    request.app.state = SimpleNamespace(**state)
    return request


# ==============================================================================
# get_catalog_repository()
# ==============================================================================


def test_fixed_repository_from_app_state() -> None:
    repository = InMemoryVehicleCatalogRepository()
    request = fake_request(catalog_repository=repository, catalog_cache=Mock())

    with patch("vehicle_catalog.entrypoints.http.dependencies.get_session") as mock_get_session:
        generator = get_catalog_repository(request)
        assert next(generator) is repository
        mock_get_session.assert_not_called()


def test_postgres_repository_uses_request_session_and_app_cache() -> None:
    cache = CatalogSnapshotCache(clock=Mock())
    request = fake_request(catalog_repository=None, catalog_cache=cache)

    mock_session = Mock()
    mock_context_manager = MagicMock()
    mock_context_manager.__enter__.return_value = mock_session
    mock_context_manager.__exit__.return_value = None

    with patch("vehicle_catalog.entrypoints.http.dependencies.get_session") as mock_get_session:
        mock_get_session.return_value = mock_context_manager

        generator = get_catalog_repository(request)
        repository = next(generator)

        assert isinstance(repository, CachedVehicleCatalogRepository)
        assert repository._cache is cache
        assert repository._primary._session is mock_session

        # Complete the generator (simulates FastAPI cleanup)
        for _ in generator:
            pass

        mock_context_manager.__exit__.assert_called_once()


# ==============================================================================
# Use case factories
# ==============================================================================


def test_filter_engine_is_app_scoped() -> None:
    engine = FilterEngine()
    assert get_filter_engine(fake_request(filter_engine=engine)) is engine


def test_query_parser_from_app_state() -> None:
    parser = Mock(spec=QueryParser)
    assert get_query_parser(fake_request(query_parser=parser)) is parser


def test_browse_listings_use_case_wiring() -> None:
    repository = InMemoryVehicleCatalogRepository()
    engine = FilterEngine()
    settings = Settings(_env_file=None, page_size=6)

    use_case = get_browse_listings_use_case(repository=repository, engine=engine, settings=settings, query_parser=None)

    assert isinstance(use_case, BrowseListings)
    assert use_case._repository is repository
    assert use_case._engine is engine
    assert use_case._page_size == 6
    assert use_case._query_parser is None


def test_filter_options_use_case_wiring() -> None:
    repository = InMemoryVehicleCatalogRepository()

    use_case = get_filter_options_use_case(repository=repository)

    assert isinstance(use_case, GetFilterOptions)
    assert use_case._repository is repository
