from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.database import get_db
from app.core.exceptions import FilterValidationError, StoreUnavailable
from app.models.search import SearchFilters, SearchUnitsResponse
from app.modules.search.service import UnitService
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


def get_unit_service(db: AsyncSession = Depends(get_db)) -> UnitService:
    return UnitService(db)


def validation_error_detail(e: FilterValidationError) -> dict:
    return {"error": "Validation failed", "details": e.errors}


@router.post("/search", response_model=SearchUnitsResponse)
async def search_units(
    filters: SearchFilters,
    unit_service: UnitService = Depends(get_unit_service)
):
    """
    Search units across the selected communities.

    Supports:
    - Feature matching (a unit must have every requested feature)
    - Bedroom, bathroom, price and square footage ranges
    - Availability filtering
    - Sorting and limit/offset pagination

    Returns the page of units together with the total number of matches.
    """
    try:
        return await unit_service.search_units(filters)

    except FilterValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=validation_error_detail(e)
        )
    except StoreUnavailable as e:
        logger.error(f"Unit search failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Unit search is temporarily unavailable"
        )
