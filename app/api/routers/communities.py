import uuid
from fastapi import APIRouter, Depends, HTTPException, status, Query
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.database import get_db
from app.core.exceptions import StoreUnavailable
from app.models.community import CommunityListResponse, CommunityResponse
from app.models.search import DEFAULT_LIMIT, MAX_LIMIT
from app.modules.communities.service import CommunityService
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


def get_community_service(db: AsyncSession = Depends(get_db)) -> CommunityService:
    return CommunityService(db)


@router.get("", response_model=CommunityListResponse)
async def get_communities(
    msa_id: Optional[uuid.UUID] = Query(None, alias="msaId", description="Only communities in this metro area"),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT, description="Maximum number of communities to return"),
    offset: int = Query(0, ge=0, description="Number of communities to skip"),
    community_service: CommunityService = Depends(get_community_service)
):
    """List communities ordered by name, with live unit counts"""
    try:
        communities, total = await community_service.get_communities(msa_id, limit, offset)
    except StoreUnavailable as e:
        logger.error(f"Failed to get communities: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Failed to retrieve communities"
        )

    return CommunityListResponse(communities=communities, total=total, limit=limit, offset=offset)


@router.get("/{community_id}", response_model=CommunityResponse)
async def get_community(
    community_id: uuid.UUID,
    community_service: CommunityService = Depends(get_community_service)
):
    """Get a single community"""
    try:
        community = await community_service.get_community(community_id)
    except StoreUnavailable as e:
        logger.error(f"Failed to get community {community_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Failed to retrieve community"
        )

    if community is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Community not found"
        )

    return CommunityResponse(community=community)
