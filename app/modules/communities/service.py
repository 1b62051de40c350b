import uuid
from typing import List, Optional, Tuple
from sqlalchemy import case, distinct, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.exceptions import StoreUnavailable
from app.db.models import Community as CommunityDB, MSA as MSADB, Unit as UnitDB
from app.models.community import Address, Community, Location
from app.models.search import DEFAULT_LIMIT
from app.models.unit import Availability
import logging

logger = logging.getLogger(__name__)


def _unit_counts_subquery():
    """Live unit totals per community; the only source for totalUnits"""
    return (
        select(
            UnitDB.community_id.label("community_id"),
            func.count(distinct(UnitDB.id)).label("total_units"),
            func.count(distinct(case(
                (UnitDB.availability == Availability.AVAILABLE.value, UnitDB.id)
            ))).label("available_units"),
        )
        .group_by(UnitDB.community_id)
        .subquery()
    )


class CommunityService:
    """Service for browsing communities"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_communities(self, msa_id: Optional[uuid.UUID] = None, limit: int = DEFAULT_LIMIT,
                              offset: int = 0) -> Tuple[List[Community], int]:
        """Communities ordered by name, optionally scoped to one metro area"""
        conditions = []
        if msa_id is not None:
            conditions.append(CommunityDB.msa_id == msa_id)

        try:
            total_result = await self.db.execute(
                select(func.count(distinct(CommunityDB.id))).where(*conditions)
            )
            total = int(total_result.scalar() or 0)

            result = await self.db.execute(
                self._community_query()
                .where(*conditions)
                .order_by(CommunityDB.name, CommunityDB.id)
                .limit(limit)
                .offset(offset)
            )
            communities = [self._to_community(*row) for row in result.all()]
        except SQLAlchemyError as e:
            logger.error(f"Failed to list communities: {e}")
            raise StoreUnavailable("Community store is unavailable") from e

        return communities, total

    async def get_community(self, community_id: uuid.UUID) -> Optional[Community]:
        """Get a single community by id"""
        try:
            result = await self.db.execute(
                self._community_query().where(CommunityDB.id == community_id)
            )
            row = result.first()
        except SQLAlchemyError as e:
            logger.error(f"Failed to get community {community_id}: {e}")
            raise StoreUnavailable("Community store is unavailable") from e

        if row is None:
            return None
        return self._to_community(*row)

    def _community_query(self):
        counts = _unit_counts_subquery()
        return (
            select(
                CommunityDB,
                MSADB.name.label("msa_name"),
                counts.c.total_units,
                counts.c.available_units,
            )
            .outerjoin(MSADB, MSADB.id == CommunityDB.msa_id)
            .outerjoin(counts, counts.c.community_id == CommunityDB.id)
        )

    def _to_community(self, community: CommunityDB, msa_name: Optional[str],
                      total_units: Optional[int], available_units: Optional[int]) -> Community:
        location = None
        if community.latitude is not None and community.longitude is not None:
            location = Location(
                latitude=float(community.latitude),
                longitude=float(community.longitude),
            )

        return Community(
            id=str(community.id),
            name=community.name,
            msa_id=str(community.msa_id) if community.msa_id else None,
            msa_name=msa_name,
            address=Address(
                street=community.street,
                city=community.city,
                state=community.state,
                zip_code=community.zip_code,
            ),
            location=location,
            total_units=total_units or 0,
            available_units=available_units or 0,
            amenities=community.amenities or [],
            created_at=community.created_at,
            updated_at=community.updated_at,
        )
