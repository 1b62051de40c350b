from typing import List, Optional, Tuple
from app.models.search import SearchFilters, NumericRange, AvailabilityFilter, SortField, DEFAULT_LIMIT
from app.modules.search.plan import (
    QueryPlan, Predicate, FeatureConstraint, SortSpec, Pagination, UnitField, Operator
)
import logging

logger = logging.getLogger(__name__)


SORT_FIELDS = {
    SortField.COMMUNITY_NAME.value: UnitField.COMMUNITY_NAME,
    SortField.UNIT_NUMBER.value: UnitField.UNIT_NUMBER,
    SortField.BEDROOMS.value: UnitField.BEDROOMS,
    SortField.BATHROOMS.value: UnitField.BATHROOMS,
    SortField.PRICE.value: UnitField.MONTHLY_RENT,
    SortField.SQUARE_FEET.value: UnitField.SQUARE_FEET,
}

DEFAULT_SORT_FIELD = UnitField.COMMUNITY_NAME


class UnitQueryBuilder:
    """Builds a QueryPlan from validated search filters"""

    def build(self, filters: SearchFilters) -> QueryPlan:
        """Build the complete plan: predicates, feature constraint, sort and pagination"""
        predicates: List[Predicate] = []

        # Search is always scoped to communities
        self._add_community_filter(predicates, filters)

        # Numeric ranges
        self._add_range_filter(predicates, UnitField.BEDROOMS, filters.bedroom_range)
        self._add_range_filter(predicates, UnitField.BATHROOMS, filters.bathroom_range)
        self._add_range_filter(predicates, UnitField.MONTHLY_RENT, filters.price_range)
        self._add_range_filter(predicates, UnitField.SQUARE_FEET, filters.square_feet_range)

        # Availability
        self._add_availability_filter(predicates, filters)

        plan = QueryPlan(
            predicates=tuple(predicates),
            feature_constraint=self._build_feature_constraint(filters),
            sort=self._build_sort(filters),
            pagination=self._build_pagination(filters),
        )

        logger.debug(f"Built query plan: {plan}")
        return plan

    def _add_community_filter(self, predicates: List[Predicate], filters: SearchFilters):
        predicates.append(Predicate(
            UnitField.COMMUNITY_ID, Operator.IN, tuple(filters.community_ids or ())
        ))

    def _add_range_filter(self, predicates: List[Predicate], field: UnitField,
                          value_range: Optional[NumericRange]):
        """Emit one predicate per supplied bound; a missing bound stays unbounded"""
        if value_range is None:
            return

        if value_range.min is not None:
            predicates.append(Predicate(field, Operator.GTE, value_range.min))
        if value_range.max is not None:
            predicates.append(Predicate(field, Operator.LTE, value_range.max))

    def _add_availability_filter(self, predicates: List[Predicate], filters: SearchFilters):
        if filters.availability is None or filters.availability == AvailabilityFilter.ALL:
            return

        predicates.append(Predicate(
            UnitField.AVAILABILITY, Operator.EQ, filters.availability.value
        ))

    def _build_feature_constraint(self, filters: SearchFilters) -> Optional[FeatureConstraint]:
        """An empty feature list means no feature constraint at all"""
        if not filters.features:
            return None

        # Repeated names in the request collapse to one requirement
        names = tuple(dict.fromkeys(filters.features))
        return FeatureConstraint(names=names)

    def _build_sort(self, filters: SearchFilters) -> Tuple[SortSpec, ...]:
        field = SORT_FIELDS.get(filters.sort_by, DEFAULT_SORT_FIELD)
        descending = (filters.sort_order or "").lower() == "desc"

        # Unit id keeps page boundaries stable between requests
        return (SortSpec(field, descending), SortSpec(UnitField.ID))

    def _build_pagination(self, filters: SearchFilters) -> Pagination:
        limit = filters.limit if filters.limit is not None else DEFAULT_LIMIT
        offset = filters.offset if filters.offset is not None else 0
        return Pagination(limit=limit, offset=offset)
