"""Tests for FastAPI exception handlers."""

import pytest
from fastapi import FastAPI, Query
from fastapi.testclient import TestClient

from vehicle_catalog.domain.criteria import FilterValidationError
from vehicle_catalog.domain.errors import CatalogUnavailableError, DomainError, ValidationError
from vehicle_catalog.entrypoints.http.exception_handlers import register_exception_handlers


@pytest.fixture
def client() -> TestClient:
    """Minimal app whose routes raise each kind of error."""
    test_app = FastAPI()
    register_exception_handlers(test_app)

    @test_app.get("/validation-error")
    def raise_validation_error() -> None:
        raise ValidationError("Validation failed")

    @test_app.get("/filter-error")
    def raise_filter_error() -> None:
        raise FilterValidationError(
            errors=[
                {
                    "field": "price_range",
                    "message": "min cannot be greater than max",
                    "code": "INVALID_RANGE",
                }
            ]
        )

    @test_app.get("/catalog-unavailable")
    def raise_catalog_unavailable() -> None:
        raise CatalogUnavailableError("postgres")

    @test_app.get("/domain-error")
    def raise_domain_error() -> None:
        raise DomainError("Something odd")

    @test_app.get("/value-error")
    def raise_value_error() -> None:
        raise ValueError("Invalid decimal")

    @test_app.get("/unexpected-error")
    def raise_unexpected_error() -> None:
        raise RuntimeError("secret internals")

    @test_app.get("/typed")
    def typed(pages: int = Query(ge=1)) -> dict[str, int]:
        return {"pages": pages}

    return TestClient(test_app, raise_server_exceptions=False)


# ==============================================================================
# Domain Errors
# ==============================================================================


def test_validation_error_returns_422(client: TestClient) -> None:
    response = client.get("/validation-error")

    assert response.status_code == 422
    assert response.json() == {"detail": "Validation failed", "code": "VALIDATION_ERROR"}


def test_field_errors_are_included(client: TestClient) -> None:
    response = client.get("/filter-error")

    assert response.status_code == 422
    data = response.json()
    assert data["code"] == "VALIDATION_ERROR"
    assert data["errors"][0]["field"] == "price_range"
    assert data["errors"][0]["code"] == "INVALID_RANGE"


def test_catalog_unavailable_returns_503(client: TestClient) -> None:
    response = client.get("/catalog-unavailable")

    assert response.status_code == 503
    assert response.json() == {
        "detail": "Vehicle catalog source 'postgres' is unavailable",
        "code": "CATALOG_UNAVAILABLE",
    }


def test_unmapped_domain_error_returns_400(client: TestClient) -> None:
    response = client.get("/domain-error")

    assert response.status_code == 400
    assert response.json()["code"] == "DOMAIN_ERROR"


# ==============================================================================
# Framework and Unexpected Errors
# ==============================================================================


def test_request_validation_error_lists_fields(client: TestClient) -> None:
    response = client.get("/typed", params={"pages": 0})

    assert response.status_code == 422
    data = response.json()
    assert data["code"] == "VALIDATION_ERROR"
    assert data["errors"][0]["field"] == "pages"


def test_value_error_returns_422(client: TestClient) -> None:
    response = client.get("/value-error")

    assert response.status_code == 422
    assert response.json() == {"detail": "Invalid decimal", "code": "INVALID_VALUE"}


def test_unexpected_error_hides_details(client: TestClient) -> None:
    response = client.get("/unexpected-error")

    assert response.status_code == 500
    assert response.json() == {"detail": "An unexpected error occurred", "code": "INTERNAL_ERROR"}
    assert "secret" not in response.text
