from __future__ import annotations

from decimal import Decimal

from vehicle_catalog.domain.criteria import (
    ANY_YEAR,
    MAX_MILEAGE,
    MAX_PRICE,
    MIN_MILEAGE,
    MIN_PRICE,
    FilterCriteria,
    NumericRange,
    RegionFilter,
)
from vehicle_catalog.domain.vehicle import ALL_CATEGORIES, Vehicle
from vehicle_catalog.entrypoints.http.dtos.listings import (
    FilterOptionsQueryDTO,
    FilterOptionsResponseDTO,
    ListingsQueryDTO,
    ListingsResponseDTO,
    SavedSearchFiltersDTO,
    VehicleResponseDTO,
)
from vehicle_catalog.use_cases.browse_listings import (
    BrowseListingsRequest,
    BrowseListingsResponse,
)
from vehicle_catalog.use_cases.get_filter_options import (
    GetFilterOptionsRequest,
    GetFilterOptionsResponse,
)


class ListingsMapper:
    """Maps between REST DTOs and domain models for the listings view."""

    @staticmethod
    def to_domain_criteria(dto: ListingsQueryDTO) -> FilterCriteria:
        """
        Converts query params to domain criteria, handling Decimal conversion.

        Missing range bounds fall back to the global min/max.
        """
        return FilterCriteria(
            category=dto.category.strip() or ALL_CATEGORIES,
            make=dto.make.strip(),
            model=dto.model.strip(),
            price_range=NumericRange(
                min=Decimal(dto.price_min) if dto.price_min else MIN_PRICE,
                max=Decimal(dto.price_max) if dto.price_max else MAX_PRICE,
            ),
            mileage_range=NumericRange(
                min=dto.mileage_min if dto.mileage_min is not None else MIN_MILEAGE,
                max=dto.mileage_max if dto.mileage_max is not None else MAX_MILEAGE,
            ),
            fuel_type=dto.fuel_type.strip(),
            year=dto.year,
            color=dto.color.strip(),
            region=RegionFilter(state=dto.state.strip(), is_user_set=dto.state_user_set),
            features=frozenset(f.strip() for f in dto.features if f.strip()),
        )

    @staticmethod
    def to_domain_request(dto: ListingsQueryDTO) -> BrowseListingsRequest:
        return BrowseListingsRequest(
            criteria=ListingsMapper.to_domain_criteria(dto),
            sort_order=dto.sort,
            pages=dto.pages,
            default_category=dto.default_category.strip() or ALL_CATEGORIES,
            query_text=dto.q,
        )

    @staticmethod
    def to_saved_search_filters(criteria: FilterCriteria) -> SavedSearchFiltersDTO:
        """Only dimensions that differ from their defaults are kept."""
        price, mileage = criteria.price_range, criteria.mileage_range
        return SavedSearchFiltersDTO(
            category=criteria.category if criteria.has_category else None,
            make=criteria.make or None,
            model=criteria.model or None,
            min_price=str(price.min) if price.min != MIN_PRICE else None,
            max_price=str(price.max) if price.max != MAX_PRICE else None,
            min_mileage=int(mileage.min) if mileage.min != MIN_MILEAGE else None,
            max_mileage=int(mileage.max) if mileage.max != MAX_MILEAGE else None,
            fuel_type=criteria.fuel_type or None,
            year=criteria.year if criteria.year != ANY_YEAR else None,
            location=criteria.region.state or None,
            features=sorted(criteria.features) or None,
        )

    @staticmethod
    def to_vehicle_response(vehicle: Vehicle) -> VehicleResponseDTO:
        """Decimal -> str at the boundary; features sorted for stable output."""
        return VehicleResponseDTO(
            id=vehicle.id,
            category=vehicle.category,
            make=vehicle.make,
            model=vehicle.model,
            year=vehicle.year,
            price=str(vehicle.price) if vehicle.price is not None else None,
            mileage=vehicle.mileage,
            fuel_type=vehicle.fuel_type,
            color=vehicle.color,
            state=vehicle.state,
            features=sorted(vehicle.features),
            is_premium_listing=vehicle.is_premium_listing,
            is_featured=vehicle.is_featured,
            average_rating=vehicle.average_rating,
        )

    @staticmethod
    def to_response(result: BrowseListingsResponse) -> ListingsResponseDTO:
        return ListingsResponseDTO(
            vehicles=[ListingsMapper.to_vehicle_response(v) for v in result.vehicles],
            total=result.total_count,
            revealed=result.revealed_count,
            has_more=result.has_more,
            total_pages=result.total_pages,
            active_filter_count=result.active_filter_count,
            sort=result.sort_order,
            filters=ListingsMapper.to_saved_search_filters(result.criteria),
            query=result.query_text,
            query_degraded=result.query_degraded,
        )

    @staticmethod
    def to_options_request(dto: FilterOptionsQueryDTO) -> GetFilterOptionsRequest:
        return GetFilterOptionsRequest(
            category=dto.category.strip() or ALL_CATEGORIES,
            make=dto.make.strip(),
            model=dto.model.strip(),
            feature_search=dto.feature_search,
        )

    @staticmethod
    def to_options_response(result: GetFilterOptionsResponse) -> FilterOptionsResponseDTO:
        choices = result.choice_sets
        return FilterOptionsResponseDTO(
            categories=list(result.categories),
            makes=list(choices.makes),
            models=list(choices.models),
            fuel_types=list(choices.fuel_types),
            years=list(choices.years),
            colors=list(choices.colors),
            features=list(result.features),
        )
