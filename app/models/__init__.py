# Pydantic models for API contracts

from .unit import Unit, Availability
from .search import (
    # Constants
    BEDROOM_RANGE, BATHROOM_RANGE, DEFAULT_LIMIT, MAX_LIMIT, MAX_OFFSET,

    # Enums
    AvailabilityFilter, SortField, SortDirection,

    # Filter models
    NumericRange, SearchFilters,

    # Response models
    SearchUnitsResponse, ValidationErrorResponse
)
from .export import ExportFormat, ExportRequest
from .community import Address, Location, Community, CommunityListResponse, CommunityResponse
from .feature import Feature, FeatureCategory, FeatureListResponse
from .msa import MSA, CensusDemographics, MSAListResponse, MSAResponse

__all__ = [
    # Unit models
    "Unit", "Availability",

    # Search constants and enums
    "BEDROOM_RANGE", "BATHROOM_RANGE", "DEFAULT_LIMIT", "MAX_LIMIT", "MAX_OFFSET",
    "AvailabilityFilter", "SortField", "SortDirection",

    # Filter models
    "NumericRange", "SearchFilters",

    # Response models
    "SearchUnitsResponse", "ValidationErrorResponse",

    # Export models
    "ExportFormat", "ExportRequest",

    # Community, feature and MSA models
    "Address", "Location", "Community", "CommunityListResponse", "CommunityResponse",
    "Feature", "FeatureCategory", "FeatureListResponse",
    "MSA", "CensusDemographics", "MSAListResponse", "MSAResponse"
]
