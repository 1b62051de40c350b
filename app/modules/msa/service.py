from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import List, Optional
import httpx
from sqlalchemy import distinct, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.config import settings
from app.core.exceptions import StoreUnavailable
from app.db.models import Community as CommunityDB, MSA as MSADB
from app.models.msa import MSA, CensusDemographics
from app.modules.msa.census_client import CensusClient
import logging

logger = logging.getLogger(__name__)

# Failures on the refresh path fall back to the stored demographics
REFRESH_ERRORS = (httpx.HTTPError, ValueError, SQLAlchemyError)


class MSAService:
    """Metro area statistics backed by stored Census demographics"""

    def __init__(self, db: AsyncSession, census_client: Optional[CensusClient] = None):
        self.db = db
        self.census_client = census_client or CensusClient()
        self.refresh_after = timedelta(days=settings.MSA_REFRESH_DAYS)

    async def close(self):
        await self.census_client.aclose()

    async def get_all_msas(self) -> List[MSA]:
        """All metro areas with their community counts, ordered by name"""
        community_count = func.count(distinct(CommunityDB.id))
        query = (
            select(MSADB, community_count.label("community_count"))
            .outerjoin(CommunityDB, CommunityDB.msa_id == MSADB.id)
            .group_by(MSADB.id)
            .order_by(MSADB.name.asc())
        )
        try:
            result = await self.db.execute(query)
            rows = result.all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to list MSAs: {e}")
            raise StoreUnavailable("MSA store is unavailable") from e

        return [self._to_msa(msa, count) for msa, count in rows]

    async def get_msa_by_code(self, code: str, force_refresh: bool = False) -> Optional[MSA]:
        """
        Get a metro area by CBSA code.

        Demographics older than MSA_REFRESH_DAYS (or any, with force_refresh)
        are refreshed from the Census API first. A failed refresh is logged and
        the stored values are returned.
        """
        msa = await self._find_by_code(code)
        if msa is None:
            return None

        if force_refresh or self._needs_refresh(msa.last_updated):
            await self._refresh(code)
            # Reload; a failed commit leaves the instance expired
            msa = await self._find_by_code(code)
            if msa is None:
                return None

        return self._to_msa(msa, await self._count_communities(msa))

    async def refresh_stale_demographics(self) -> int:
        """Refresh every metro area whose demographics are stale; returns how many were updated"""
        try:
            result = await self.db.execute(select(MSADB).order_by(MSADB.code))
            msas = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to load MSAs for refresh: {e}")
            raise StoreUnavailable("MSA store is unavailable") from e

        stale_codes = [msa.code for msa in msas if self._needs_refresh(msa.last_updated)]
        refreshed = 0
        for code in stale_codes:
            if await self._refresh(code):
                refreshed += 1

        logger.info(f"Refreshed demographics for {refreshed} of {len(msas)} MSAs")
        return refreshed

    def _needs_refresh(self, last_updated: Optional[datetime]) -> bool:
        if last_updated is None:
            return True
        if last_updated.tzinfo is None:
            last_updated = last_updated.replace(tzinfo=timezone.utc)
        return datetime.now(timezone.utc) - last_updated > self.refresh_after

    async def _refresh(self, code: str) -> bool:
        try:
            demographics = await self.census_client.fetch_msa_demographics(code)
            if demographics.is_empty():
                return False
            msa = await self._find_by_code(code)
            if msa is None:
                return False
            await self._update_demographics(msa, demographics)
            return True
        except REFRESH_ERRORS as e:
            logger.warning(f"Failed to refresh demographics for MSA {code}: {e}")
            await self.db.rollback()
            return False
        except StoreUnavailable as e:
            logger.warning(f"Failed to refresh demographics for MSA {code}: {e}")
            return False

    async def _update_demographics(self, msa: MSADB, demographics: CensusDemographics):
        msa.population = demographics.population
        msa.median_income = demographics.median_income
        msa.housing_units = demographics.housing_units
        msa.rental_vacancy_rate = (
            Decimal(str(demographics.rental_vacancy_rate))
            if demographics.rental_vacancy_rate is not None else None
        )
        msa.last_updated = datetime.now(timezone.utc)
        await self.db.commit()
        await self.db.refresh(msa)
        logger.info(f"Updated demographics for MSA {msa.code}")

    async def _find_by_code(self, code: str) -> Optional[MSADB]:
        try:
            result = await self.db.execute(select(MSADB).where(MSADB.code == code))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Failed to get MSA {code}: {e}")
            raise StoreUnavailable("MSA store is unavailable") from e

    async def _count_communities(self, msa: MSADB) -> int:
        try:
            result = await self.db.execute(
                select(func.count(CommunityDB.id)).where(CommunityDB.msa_id == msa.id)
            )
            return int(result.scalar() or 0)
        except SQLAlchemyError as e:
            logger.error(f"Failed to count communities for MSA {msa.code}: {e}")
            raise StoreUnavailable("MSA store is unavailable") from e

    def _to_msa(self, msa: MSADB, community_count: Optional[int]) -> MSA:
        return MSA(
            id=str(msa.id),
            code=msa.code,
            name=msa.name,
            state=msa.state,
            population=msa.population,
            median_income=msa.median_income,
            housing_units=msa.housing_units,
            rental_vacancy_rate=(
                float(msa.rental_vacancy_rate) if msa.rental_vacancy_rate is not None else None
            ),
            last_updated=msa.last_updated,
            community_count=community_count or 0,
        )
