import uuid
from fastapi import APIRouter, Depends, HTTPException, status, Query
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.database import get_db
from app.core.exceptions import StoreUnavailable
from app.models.feature import FeatureListResponse
from app.modules.features.service import FeatureService
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


def get_feature_service(db: AsyncSession = Depends(get_db)) -> FeatureService:
    return FeatureService(db)


@router.get("", response_model=FeatureListResponse)
async def get_features(
    community_id: Optional[uuid.UUID] = Query(None, alias="communityId", description="Count only this community's units"),
    feature_service: FeatureService = Depends(get_feature_service)
):
    """All unit features with how many units carry each, most common first"""
    try:
        features = await feature_service.get_features(community_id)
    except StoreUnavailable as e:
        logger.error(f"Failed to get features: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Failed to retrieve features"
        )

    return FeatureListResponse(features=features, total=len(features))
