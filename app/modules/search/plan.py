"""
Store-agnostic description of a unit search.

The query builder emits these descriptors; ``app.modules.search.sql`` renders
them into SQLAlchemy statements in a single step.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple


class UnitField(str, Enum):
    ID = "id"
    COMMUNITY_ID = "community_id"
    COMMUNITY_NAME = "community_name"
    UNIT_NUMBER = "unit_number"
    BEDROOMS = "bedrooms"
    BATHROOMS = "bathrooms"
    MONTHLY_RENT = "monthly_rent"
    SQUARE_FEET = "square_feet"
    AVAILABILITY = "availability"


class Operator(str, Enum):
    IN = "in"
    EQ = "eq"
    GTE = "gte"
    LTE = "lte"


@dataclass(frozen=True)
class Predicate:
    field: UnitField
    operator: Operator
    value: Any


@dataclass(frozen=True)
class FeatureConstraint:
    """Unit must carry every one of ``names`` (AND semantics)"""
    names: Tuple[str, ...]

    @property
    def required_count(self) -> int:
        return len(self.names)


@dataclass(frozen=True)
class SortSpec:
    field: UnitField
    descending: bool = False


@dataclass(frozen=True)
class Pagination:
    limit: int
    offset: int


@dataclass(frozen=True)
class QueryPlan:
    predicates: Tuple[Predicate, ...]
    feature_constraint: Optional[FeatureConstraint]
    sort: Tuple[SortSpec, ...]
    pagination: Pagination
