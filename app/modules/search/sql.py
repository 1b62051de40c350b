"""
Renders a QueryPlan into SQLAlchemy statements
"""
import uuid
from decimal import Decimal
from typing import Iterable
from sqlalchemy import Numeric, Select, distinct, func, literal, select
from sqlalchemy.sql.elements import ColumnElement
from app.db.models import Community as CommunityDB, Feature as FeatureDB, Unit as UnitDB, UnitFeature as UnitFeatureDB
from app.modules.search.plan import FeatureConstraint, Operator, Predicate, QueryPlan, UnitField


COLUMNS = {
    UnitField.ID: UnitDB.id,
    UnitField.COMMUNITY_ID: UnitDB.community_id,
    UnitField.COMMUNITY_NAME: CommunityDB.name,
    UnitField.UNIT_NUMBER: UnitDB.unit_number,
    UnitField.BEDROOMS: UnitDB.bedrooms,
    UnitField.BATHROOMS: UnitDB.bathrooms,
    UnitField.MONTHLY_RENT: UnitDB.monthly_rent,
    UnitField.SQUARE_FEET: UnitDB.square_feet,
    UnitField.AVAILABILITY: UnitDB.availability,
}

UUID_FIELDS = {UnitField.ID, UnitField.COMMUNITY_ID}


def render_predicate(predicate: Predicate) -> ColumnElement:
    column = COLUMNS[predicate.field]

    if predicate.operator == Operator.IN:
        return column.in_([_bind_value(predicate.field, value) for value in predicate.value])
    if predicate.operator == Operator.EQ:
        return column == _bind_value(predicate.field, predicate.value)
    if predicate.operator == Operator.GTE:
        return column >= _numeric(predicate.value)
    if predicate.operator == Operator.LTE:
        return column <= _numeric(predicate.value)

    raise ValueError(f"Unsupported operator: {predicate.operator}")


def feature_match_subquery(constraint: FeatureConstraint) -> Select:
    """Ids of units that carry every requested feature.

    Association rows are restricted to the requested names and grouped by
    unit; counting distinct names makes repeated association rows harmless.
    """
    return (
        select(UnitFeatureDB.unit_id)
        .join(FeatureDB, FeatureDB.id == UnitFeatureDB.feature_id)
        .where(FeatureDB.name.in_(constraint.names))
        .group_by(UnitFeatureDB.unit_id)
        .having(func.count(distinct(FeatureDB.name)) == constraint.required_count)
    )


def build_count_statement(plan: QueryPlan) -> Select:
    """Distinct matching units, ignoring sort and pagination"""
    return _filtered(plan, func.count(distinct(UnitDB.id)))


def build_page_statement(plan: QueryPlan) -> Select:
    """One row per unit with its community name, sorted then paginated"""
    order_by = []
    for sort_spec in plan.sort:
        column = COLUMNS[sort_spec.field]
        order_by.append(column.desc() if sort_spec.descending else column.asc())

    return (
        _filtered(plan, UnitDB, CommunityDB.name.label("community_name"))
        .order_by(*order_by)
        .limit(plan.pagination.limit)
        .offset(plan.pagination.offset)
    )


def build_feature_statement(unit_ids: Iterable[uuid.UUID]) -> Select:
    """Every feature name attached to the given units"""
    return (
        select(UnitFeatureDB.unit_id, FeatureDB.name)
        .join(FeatureDB, FeatureDB.id == UnitFeatureDB.feature_id)
        .where(UnitFeatureDB.unit_id.in_(list(unit_ids)))
        .distinct()
        .order_by(UnitFeatureDB.unit_id, FeatureDB.name)
    )


def _filtered(plan: QueryPlan, *columns) -> Select:
    conditions = [render_predicate(predicate) for predicate in plan.predicates]

    if plan.feature_constraint is not None:
        conditions.append(UnitDB.id.in_(feature_match_subquery(plan.feature_constraint)))

    return (
        select(*columns)
        .select_from(UnitDB)
        .join(CommunityDB, CommunityDB.id == UnitDB.community_id)
        .where(*conditions)
    )


def _bind_value(field: UnitField, value):
    if field in UUID_FIELDS:
        return uuid.UUID(str(value))
    return value


def _numeric(value) -> ColumnElement:
    # Bound as NUMERIC so integer and decimal columns compare exactly
    return literal(Decimal(str(value)), Numeric())
