"""
Test suite for the /v1/vehicles routes.

Verifies the route pattern: parse query → execute use case → map response.
- Query parameters are validated and mapped to domain requests
- Use cases are injected via dependencies (overridden here)
- Domain errors become structured error responses
"""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import Mock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from vehicle_catalog.domain.catalog_index import ChoiceSets
from vehicle_catalog.domain.criteria import FilterCriteria, FilterValidationError, SortOrder
from vehicle_catalog.domain.errors import CatalogUnavailableError
from vehicle_catalog.domain.vehicle import Vehicle
from vehicle_catalog.entrypoints.http.dependencies import (
    get_browse_listings_use_case,
    get_filter_options_use_case,
)
from vehicle_catalog.entrypoints.http.exception_handlers import register_exception_handlers
from vehicle_catalog.entrypoints.http.routes.vehicles import router
from vehicle_catalog.use_cases.browse_listings import BrowseListingsRequest, BrowseListingsResponse
from vehicle_catalog.use_cases.get_filter_options import GetFilterOptionsResponse


@pytest.fixture
def app() -> FastAPI:
    """Test app with the vehicles router and exception handlers."""
    test_app = FastAPI()
    register_exception_handlers(test_app)
    test_app.include_router(router, prefix="/v1")
    return test_app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def mock_use_case(app: FastAPI) -> Mock:
    """Mock browse use case, installed as a dependency override."""
    use_case = Mock()
    app.dependency_overrides[get_browse_listings_use_case] = lambda: use_case
    return use_case


def browse_response(criteria: FilterCriteria, sort_order: SortOrder = SortOrder.YEAR_DESC) -> BrowseListingsResponse:
    vehicles = [
        Vehicle(id=1, category="SUV", make="Toyota", model="Fortuner", year=2021, price=Decimal("3200000.00")),
        Vehicle(id=2, category="SUV", make="Kia", model="Seltos", year=2020, price=None),
    ]
    return BrowseListingsResponse(
        vehicles=vehicles,
        total_count=14,
        revealed_count=2,
        has_more=True,
        total_pages=2,
        active_filter_count=1,
        criteria=criteria,
        sort_order=sort_order,
    )


# ==============================================================================
# GET /v1/vehicles - Happy Path
# ==============================================================================


def test_get_vehicles_success(client: TestClient, mock_use_case: Mock) -> None:
    mock_use_case.execute.return_value = browse_response(FilterCriteria(category="SUV"))

    response = client.get("/v1/vehicles", params={"category": "SUV"})

    assert response.status_code == 200
    data = response.json()
    assert [v["id"] for v in data["vehicles"]] == [1, 2]
    assert data["vehicles"][0]["price"] == "3200000.00"
    assert data["vehicles"][1]["price"] is None
    assert data["total"] == 14
    assert data["revealed"] == 2
    assert data["has_more"] is True
    assert data["total_pages"] == 2
    assert data["active_filter_count"] == 1
    assert data["sort"] == "YEAR_DESC"
    assert data["filters"]["category"] == "SUV"
    assert data["query"] == ""
    assert data["query_degraded"] is False


def test_query_params_reach_use_case(client: TestClient, mock_use_case: Mock) -> None:
    mock_use_case.execute.return_value = browse_response(FilterCriteria())

    response = client.get(
        "/v1/vehicles",
        params={
            "category": "SUV",
            "make": "Toyota",
            "price_min": "500000",
            "price_max": "1500000",
            "state": "KA",
            "state_user_set": "true",
            "features": ["Sunroof", "Rear Camera"],
            "sort": "PRICE_ASC",
            "pages": 2,
            "q": "toyota under 15 lakh",
        },
    )

    assert response.status_code == 200
    request: BrowseListingsRequest = mock_use_case.execute.call_args.args[0]
    assert request.criteria.make == "Toyota"
    assert request.criteria.price_range.min == Decimal("500000")
    assert request.criteria.price_range.max == Decimal("1500000")
    assert request.criteria.region.is_enforced
    assert request.criteria.features == frozenset({"Sunroof", "Rear Camera"})
    assert request.sort_order is SortOrder.PRICE_ASC
    assert request.pages == 2
    assert request.query_text == "toyota under 15 lakh"


# ==============================================================================
# GET /v1/vehicles - Validation Errors
# ==============================================================================


@pytest.mark.parametrize(
    ("params", "field"),
    [
        ({"price_min": "abc"}, "price_min"),
        ({"pages": 0}, "pages"),
        ({"pages": 101}, "pages"),
        ({"sort": "NEWEST"}, "sort"),
        ({"year": -1}, "year"),
    ],
)
def test_invalid_query_params_rejected(
    client: TestClient, mock_use_case: Mock, params: dict[str, object], field: str
) -> None:
    response = client.get("/v1/vehicles", params=params)

    assert response.status_code == 422
    data = response.json()
    assert data["code"] == "VALIDATION_ERROR"
    assert data["errors"][0]["field"] == field
    mock_use_case.execute.assert_not_called()


def test_domain_validation_error_from_use_case(client: TestClient, mock_use_case: Mock) -> None:
    mock_use_case.execute.side_effect = FilterValidationError(
        errors=[{"field": "price_range", "message": "min cannot be greater than max", "code": "INVALID_RANGE"}]
    )

    response = client.get("/v1/vehicles", params={"price_min": "900000", "price_max": "100"})

    assert response.status_code == 422
    assert response.json()["errors"][0]["code"] == "INVALID_RANGE"


def test_catalog_unavailable_returns_503(client: TestClient, mock_use_case: Mock) -> None:
    mock_use_case.execute.side_effect = CatalogUnavailableError("postgres")

    response = client.get("/v1/vehicles")

    assert response.status_code == 503
    assert response.json()["code"] == "CATALOG_UNAVAILABLE"


# ==============================================================================
# GET /v1/vehicles/options
# ==============================================================================


def test_get_vehicle_options(app: FastAPI, client: TestClient) -> None:
    use_case = Mock()
    use_case.execute.return_value = GetFilterOptionsResponse(
        categories=("Sedan", "SUV"),
        choice_sets=ChoiceSets(
            makes=("Kia", "Toyota"),
            models=("Fortuner",),
            fuel_types=("Diesel",),
            years=(2021,),
            colors=("White",),
        ),
        features=("Sunroof",),
    )
    app.dependency_overrides[get_filter_options_use_case] = lambda: use_case

    response = client.get("/v1/vehicles/options", params={"category": "SUV", "make": "Toyota"})

    assert response.status_code == 200
    assert response.json() == {
        "categories": ["Sedan", "SUV"],
        "makes": ["Kia", "Toyota"],
        "models": ["Fortuner"],
        "fuel_types": ["Diesel"],
        "years": [2021],
        "colors": ["White"],
        "features": ["Sunroof"],
    }
    request = use_case.execute.call_args.args[0]
    assert (request.category, request.make) == ("SUV", "Toyota")
