import asyncio
from collections import defaultdict
from typing import Dict, List, Optional, Tuple
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.config import settings
from app.core.exceptions import StoreUnavailable
from app.db.models import Unit as UnitDB
from app.models.unit import Unit
from app.modules.search.plan import QueryPlan
from app.modules.search.sql import build_count_statement, build_feature_statement, build_page_statement
import logging

logger = logging.getLogger(__name__)


class UnitSearchExecutor:
    """Runs a QueryPlan against the warehouse: count first, then the page"""

    def __init__(self, db: AsyncSession, timeout: Optional[float] = None):
        self.db = db
        self.timeout = timeout if timeout is not None else settings.STORE_TIMEOUT_SECONDS

    async def execute(self, plan: QueryPlan) -> Tuple[List[Unit], int]:
        """Return the requested page of units and the total number of matches"""
        try:
            total = await self._count(plan)
            units = await self._fetch_page(plan)
        except (SQLAlchemyError, OSError, asyncio.TimeoutError) as e:
            logger.error(f"Unit search failed against the store: {e}")
            raise StoreUnavailable("Unit store is unavailable") from e

        logger.info(f"Unit search matched {total} units, returning {len(units)}")
        return units, total

    async def _count(self, plan: QueryPlan) -> int:
        result = await self._run(build_count_statement(plan))
        return int(result.scalar() or 0)

    async def _fetch_page(self, plan: QueryPlan) -> List[Unit]:
        result = await self._run(build_page_statement(plan))

        # Collapse any repeated rows to one record per unit, keeping sort order
        page: Dict = {}
        for unit_row, community_name in result.all():
            page.setdefault(unit_row.id, (unit_row, community_name))

        if not page:
            return []

        features = await self._load_features(list(page))
        return [
            self._to_unit(unit_row, community_name, features.get(unit_id, []))
            for unit_id, (unit_row, community_name) in page.items()
        ]

    async def _load_features(self, unit_ids: list) -> Dict:
        """Complete feature set for each unit, not only the requested ones"""
        result = await self._run(build_feature_statement(unit_ids))

        features = defaultdict(list)
        for unit_id, name in result.all():
            if name not in features[unit_id]:
                features[unit_id].append(name)
        return features

    async def _run(self, statement):
        # A stalled connection fails the request instead of hanging it
        return await asyncio.wait_for(self.db.execute(statement), timeout=self.timeout)

    def _to_unit(self, unit_row: UnitDB, community_name: str, features: List[str]) -> Unit:
        return Unit(
            id=str(unit_row.id),
            community_id=str(unit_row.community_id),
            community_name=community_name,
            unit_number=unit_row.unit_number,
            bedrooms=unit_row.bedrooms,
            bathrooms=float(unit_row.bathrooms),
            square_feet=unit_row.square_feet,
            monthly_rent=float(unit_row.monthly_rent),
            features=features,
            availability=unit_row.availability,
            floor_plan=unit_row.floor_plan,
            photo_urls=unit_row.photo_urls or [],
            floor_plan_urls=unit_row.floor_plan_urls or [],
            virtual_tour_url=unit_row.virtual_tour_url,
            created_at=unit_row.created_at,
            updated_at=unit_row.updated_at,
        )
