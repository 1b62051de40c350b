from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.database import get_db
from app.core.exceptions import StoreUnavailable
from app.models.msa import MSAListResponse, MSAResponse
from app.modules.msa.service import MSAService
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


async def get_msa_service(db: AsyncSession = Depends(get_db)):
    service = MSAService(db)
    try:
        yield service
    finally:
        await service.close()


@router.get("", response_model=MSAListResponse)
async def get_msas(
    msa_service: MSAService = Depends(get_msa_service)
):
    """List metro areas with stored demographics and community counts"""
    try:
        msas = await msa_service.get_all_msas()
    except StoreUnavailable as e:
        logger.error(f"Failed to get MSAs: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Failed to retrieve MSAs"
        )

    return MSAListResponse(msas=msas, total=len(msas))


@router.get("/{code}", response_model=MSAResponse)
async def get_msa(
    code: str,
    force_refresh: bool = Query(False, alias="forceRefresh", description="Refresh demographics from the Census API"),
    msa_service: MSAService = Depends(get_msa_service)
):
    """
    Get a metro area by CBSA code.

    Demographics older than a year are refreshed from the US Census Bureau
    before returning; if the Census API is unavailable the stored values are
    returned.
    """
    try:
        msa = await msa_service.get_msa_by_code(code, force_refresh)
    except StoreUnavailable as e:
        logger.error(f"Failed to get MSA {code}: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Failed to retrieve MSA"
        )

    if msa is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="MSA not found"
        )

    return MSAResponse(msa=msa)
