from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional, List
from enum import Enum
from app.models.unit import Unit


# Domain bounds for filter validation
BEDROOM_RANGE = (0, 5)
BATHROOM_RANGE = (0, 4)
DEFAULT_LIMIT = 50
MAX_LIMIT = 1000
MAX_OFFSET = 2 ** 63 - 1  # largest value a BIGINT OFFSET accepts


class AvailabilityFilter(str, Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    ALL = "all"


class SortField(str, Enum):
    COMMUNITY_NAME = "communityName"
    UNIT_NUMBER = "unitNumber"
    BEDROOMS = "bedrooms"
    BATHROOMS = "bathrooms"
    PRICE = "price"
    SQUARE_FEET = "squareFeet"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class NumericRange(BaseModel):
    """Inclusive range; a missing bound means unbounded on that side"""
    min: Optional[float] = None
    max: Optional[float] = None


class SearchFilters(BaseModel):
    """Unit search request.

    Only the structure is enforced here. Domain rules (ranges, pagination
    bounds, required communities) are reported by
    ``app.modules.search.validation.validate_search_filters`` so that every
    violation can be returned at once.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    community_ids: Optional[List[str]] = None
    features: Optional[List[str]] = None
    bedroom_range: Optional[NumericRange] = None
    bathroom_range: Optional[NumericRange] = None
    price_range: Optional[NumericRange] = None
    square_feet_range: Optional[NumericRange] = None
    availability: Optional[AvailabilityFilter] = None
    # Free-form so unknown values can fall back to the default sort
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None
    limit: Optional[int] = None
    offset: Optional[int] = None


class SearchUnitsResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    units: List[Unit]
    total: int
    limit: int
    offset: int
    applied_filters: SearchFilters


class ValidationErrorResponse(BaseModel):
    error: str = "Validation failed"
    details: List[str] = []
