from sqlalchemy.ext.asyncio import AsyncSession
from app.core.exceptions import FilterValidationError
from app.models.search import SearchFilters, SearchUnitsResponse, SortField, SortDirection, DEFAULT_LIMIT
from app.modules.search.executor import UnitSearchExecutor
from app.modules.search.query_builder import UnitQueryBuilder
from app.modules.search.validation import validate_search_filters
import logging

logger = logging.getLogger(__name__)


def apply_search_defaults(filters: SearchFilters) -> SearchFilters:
    """Return a copy with pagination and sort defaults filled in"""
    return filters.model_copy(update={
        "limit": filters.limit if filters.limit is not None else DEFAULT_LIMIT,
        "offset": filters.offset if filters.offset is not None else 0,
        "sort_by": filters.sort_by or SortField.COMMUNITY_NAME.value,
        "sort_order": filters.sort_order or SortDirection.ASC.value,
    })


class UnitService:
    """Service for unit search operations"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.query_builder = UnitQueryBuilder()
        self.executor = UnitSearchExecutor(db)

    async def search_units(self, filters: SearchFilters) -> SearchUnitsResponse:
        """Validate, build and execute a unit search.

        Raises FilterValidationError with every violation when the filters are
        invalid, and StoreUnavailable when the warehouse cannot answer.
        """
        errors = validate_search_filters(filters)
        if errors:
            logger.info(f"Rejected unit search filters: {errors}")
            raise FilterValidationError(errors)

        effective_filters = apply_search_defaults(filters)
        plan = self.query_builder.build(effective_filters)
        units, total = await self.executor.execute(plan)

        return SearchUnitsResponse(
            units=units,
            total=total,
            limit=plan.pagination.limit,
            offset=plan.pagination.offset,
            applied_filters=effective_filters,
        )
