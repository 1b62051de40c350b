import uuid
from typing import List, Optional
from sqlalchemy import distinct, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.exceptions import StoreUnavailable
from app.db.models import Feature as FeatureDB, Unit as UnitDB, UnitFeature as UnitFeatureDB
from app.models.feature import Feature, FeatureCategory
import logging

logger = logging.getLogger(__name__)


class FeatureService:
    """Service for the unit feature catalogue"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_features(self, community_id: Optional[uuid.UUID] = None) -> List[Feature]:
        """
        Features with the number of distinct units carrying each, most used first.

        When scoped to a community only that community's units are counted and
        only features present there are returned.
        """
        unit_count = func.count(distinct(UnitFeatureDB.unit_id))
        query = (
            select(FeatureDB, unit_count.label("unit_count"))
            .outerjoin(UnitFeatureDB, UnitFeatureDB.feature_id == FeatureDB.id)
        )

        if community_id is not None:
            query = (
                query.join(UnitDB, UnitDB.id == UnitFeatureDB.unit_id)
                .where(UnitDB.community_id == community_id)
            )

        query = query.group_by(FeatureDB.id).order_by(unit_count.desc(), FeatureDB.name.asc())

        try:
            result = await self.db.execute(query)
            rows = result.all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to list features: {e}")
            raise StoreUnavailable("Feature store is unavailable") from e

        return [self._to_feature(feature, count) for feature, count in rows]

    def _to_feature(self, feature: FeatureDB, unit_count: Optional[int]) -> Feature:
        return Feature(
            id=str(feature.id),
            name=feature.name,
            category=self._parse_category(feature.category),
            description=feature.description,
            unit_count=unit_count or 0,
            is_popular=bool(feature.is_popular),
        )

    def _parse_category(self, category: Optional[str]) -> Optional[FeatureCategory]:
        if category is None:
            return None
        try:
            return FeatureCategory(category.lower())
        except ValueError:
            logger.warning(f"Unknown feature category '{category}', using 'other'")
            return FeatureCategory.OTHER
