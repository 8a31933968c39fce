"""
Tests for FastAPI application setup and wiring.

The app is built with the in-memory catalog source, so these tests run the
whole request path (routes → use cases → engine → repository) without a
database.
"""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import Mock, patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from vehicle_catalog.adapters.cached_vehicle_catalog_repository import CatalogSnapshotCache
from vehicle_catalog.adapters.in_memory_vehicle_catalog_repository import (
    InMemoryVehicleCatalogRepository,
)
from vehicle_catalog.adapters.openai_query_parser import OpenAIQueryParser
from vehicle_catalog.domain.errors import QueryParseError
from vehicle_catalog.domain.vehicle import Vehicle
from vehicle_catalog.entrypoints.http.app import build_app
from vehicle_catalog.infra.config.settings import Settings
from vehicle_catalog.ports.query_parser import ParsedQuery, QueryParser
from vehicle_catalog.use_cases.filter_engine import FilterEngine


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, catalog_source="in_memory", sample_catalog_size=30, page_size=12)


@pytest.fixture
def repository() -> InMemoryVehicleCatalogRepository:
    vehicles = [
        Vehicle(
            id=i,
            category="SUV" if i % 2 else "Sedan",
            make="Toyota" if i % 3 else "Kia",
            model="Fortuner" if i % 3 else "Seltos",
            year=2010 + i % 15,
            price=Decimal(300000 + i * 20000),
        )
        for i in range(1, 26)
    ]
    return InMemoryVehicleCatalogRepository(vehicles)


@pytest.fixture
def client(settings: Settings, repository: InMemoryVehicleCatalogRepository) -> TestClient:
    return TestClient(build_app(settings=settings, repository=repository))


# ==============================================================================
# Application Creation
# ==============================================================================


def test_build_app_returns_fastapi_instance(settings: Settings) -> None:
    app = build_app(settings=settings)

    assert isinstance(app, FastAPI)
    assert app.title == "Vehicle Catalog API"
    assert app.version == "0.1.0"


def test_each_app_owns_its_state(settings: Settings) -> None:
    first, second = build_app(settings=settings), build_app(settings=settings)

    assert isinstance(first.state.filter_engine, FilterEngine)
    assert isinstance(first.state.catalog_cache, CatalogSnapshotCache)
    assert first.state.filter_engine is not second.state.filter_engine
    assert first.state.catalog_cache is not second.state.catalog_cache


def test_in_memory_source_gets_sample_listings(settings: Settings) -> None:
    app = build_app(settings=settings)
    assert len(app.state.catalog_repository.load()) == 30


def test_postgres_source_resolves_repository_per_request(settings: Settings) -> None:
    app = build_app(settings=settings.model_copy(update={"catalog_source": "postgres"}))
    assert app.state.catalog_repository is None


def test_unknown_source_rejected(settings: Settings) -> None:
    with pytest.raises(ValueError, match="Unknown catalog source"):
        build_app(settings=settings.model_copy(update={"catalog_source": "redis"}))


def test_routes_registered(settings: Settings) -> None:
    paths = {route.path for route in build_app(settings=settings).routes}  # type: ignore[attr-defined]

    assert "/health" in paths
    assert "/v1/vehicles" in paths
    assert "/v1/vehicles/options" in paths


def test_openapi_schema_generates(client: TestClient) -> None:
    response = client.get("/openapi.json")

    assert response.status_code == 200
    assert "/v1/vehicles" in response.json()["paths"]


# ==============================================================================
# End-to-end Listing Flow
# ==============================================================================


def test_listing_first_page(client: TestClient) -> None:
    response = client.get("/v1/vehicles")

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 25
    assert data["revealed"] == 12
    assert data["has_more"] is True
    assert data["total_pages"] == 3


def test_listing_pages_reveal_prefix(client: TestClient) -> None:
    one = client.get("/v1/vehicles", params={"sort": "PRICE_ASC"}).json()
    three = client.get("/v1/vehicles", params={"sort": "PRICE_ASC", "pages": 3}).json()

    assert three["revealed"] == 25
    assert three["has_more"] is False
    assert three["vehicles"][:12] == one["vehicles"]


def test_listing_filters_and_counts(client: TestClient) -> None:
    response = client.get(
        "/v1/vehicles",
        params={"category": "suv", "make": "toyota", "price_max": "600000"},
    )

    data = response.json()
    assert data["active_filter_count"] == 3
    assert data["filters"] == {
        "category": "suv",
        "make": "toyota",
        "model": None,
        "min_price": None,
        "max_price": "600000",
        "min_mileage": None,
        "max_mileage": None,
        "fuel_type": None,
        "year": None,
        "location": None,
        "features": None,
    }
    for vehicle in data["vehicles"]:
        assert vehicle["category"] == "SUV"
        assert vehicle["make"] == "Toyota"
        assert Decimal(vehicle["price"]) <= Decimal("600000")


def test_inverted_range_rejected(client: TestClient) -> None:
    response = client.get("/v1/vehicles", params={"mileage_min": 5000, "mileage_max": 100})

    assert response.status_code == 422
    assert response.json()["errors"][0]["field"] == "mileage_range"


def test_options_follow_selection(client: TestClient) -> None:
    data = client.get("/v1/vehicles/options", params={"make": "Kia"}).json()

    assert data["categories"] == ["Sedan", "SUV"]
    assert data["makes"] == ["Kia", "Toyota"]
    assert data["models"] == ["Seltos"]


def test_health(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok"}


# ==============================================================================
# Free-text search
# ==============================================================================


def test_query_parser_disabled_by_default(settings: Settings) -> None:
    assert build_app(settings=settings).state.query_parser is None


def test_llm_enabled_builds_openai_parser(settings: Settings) -> None:
    enabled = settings.model_copy(update={"llm_enabled": True, "openai_api_key": "sk-test"})

    with patch("vehicle_catalog.adapters.openai_query_parser.OpenAI"):
        app = build_app(settings=enabled)

    assert isinstance(app.state.query_parser, OpenAIQueryParser)


def test_free_text_query_becomes_filters(
    settings: Settings, repository: InMemoryVehicleCatalogRepository
) -> None:
    parser = Mock(spec=QueryParser)
    parser.parse.return_value = ParsedQuery(make="kia", max_price=Decimal("700000"))
    client = TestClient(build_app(settings=settings, repository=repository, query_parser=parser))

    data = client.get("/v1/vehicles", params={"q": "kia under 7 lakh"}).json()

    parser.parse.assert_called_once_with("kia under 7 lakh")
    assert data["query"] == "kia under 7 lakh"
    assert data["query_degraded"] is False
    assert data["filters"]["make"] == "kia"
    assert data["filters"]["max_price"] == "700000"
    assert data["total"] > 0
    assert all(v["make"] == "Kia" for v in data["vehicles"])


def test_free_text_parser_failure_degrades(
    settings: Settings, repository: InMemoryVehicleCatalogRepository
) -> None:
    parser = Mock(spec=QueryParser)
    parser.parse.side_effect = QueryParseError("OpenAI API call failed")
    client = TestClient(build_app(settings=settings, repository=repository, query_parser=parser))

    response = client.get("/v1/vehicles", params={"q": "something vague"})

    assert response.status_code == 200
    data = response.json()
    assert data["query_degraded"] is True
    assert data["total"] == 25
