from typing import Annotated

from fastapi import APIRouter, Depends, Query

from vehicle_catalog.entrypoints.http.dependencies import (
    get_browse_listings_use_case,
    get_filter_options_use_case,
)
from vehicle_catalog.entrypoints.http.dtos.listings import (
    FilterOptionsQueryDTO,
    FilterOptionsResponseDTO,
    ListingsQueryDTO,
    ListingsResponseDTO,
)
from vehicle_catalog.entrypoints.http.error_responses import ErrorResponse
from vehicle_catalog.entrypoints.http.mappers.listings_mapper import ListingsMapper
from vehicle_catalog.use_cases.browse_listings import BrowseListings
from vehicle_catalog.use_cases.get_filter_options import GetFilterOptions


router = APIRouter(tags=["Vehicles"])


@router.get(
    "/vehicles",
    response_model=ListingsResponseDTO,
    summary="Browse vehicle listings",
    description="""
    Filtered, ranked and incrementally revealed vehicle listings.

    ## Filters
    - All filters use AND semantics
    - Make/model/fuel type/color: case-insensitive exact match
    - Price/mileage: inclusive ranges; listings without a value are never excluded
    - State: only enforced when `state_user_set=true`
    - Features: listing must have every requested feature
    - q: free text; when a parser is configured, recognised make, model, price
      and features are folded into the filters (`query_degraded=true` if it failed)

    ## Ranking
    - Promoted listings first (spotlight, top search, featured, premium, other boosts)
    - Then the requested `sort`; ties keep catalog order

    ## Pagination
    - Pages of 12; `pages=N` reveals the first N pages
    - `has_more=false` means every matching listing is revealed

    ## Example
    ```
    GET /v1/vehicles?category=SUV&price_min=500000&price_max=1500000&sort=PRICE_ASC&pages=2
    ```
    """,
    responses={
        422: {"model": ErrorResponse, "description": "Validation error"},
        503: {"model": ErrorResponse, "description": "Catalog source unavailable"},
    },
)
def get_vehicles(
    query: Annotated[ListingsQueryDTO, Query()],
    use_case: BrowseListings = Depends(get_browse_listings_use_case),
) -> ListingsResponseDTO:
    """Browse listings following parse → execute → map → return pattern."""
    # 1. Map to domain request
    request = ListingsMapper.to_domain_request(query)

    # 2. Execute use case
    result = use_case.execute(request)

    # 3. Map to response
    return ListingsMapper.to_response(result)


@router.get(
    "/vehicles/options",
    response_model=FilterOptionsResponseDTO,
    summary="Filter choices",
    description="""
    Values each filter control may offer for the current selection.

    - makes are scoped to `category`
    - models to `category` + `make`
    - fuel types, years and colors to `category` + `make` + `model`
    - features are the catalog vocabulary narrowed by `feature_search`
    """,
    responses={503: {"model": ErrorResponse, "description": "Catalog source unavailable"}},
)
def get_vehicle_options(
    query: Annotated[FilterOptionsQueryDTO, Query()],
    use_case: GetFilterOptions = Depends(get_filter_options_use_case),
) -> FilterOptionsResponseDTO:
    request = ListingsMapper.to_options_request(query)
    result = use_case.execute(request)
    return ListingsMapper.to_options_response(result)
