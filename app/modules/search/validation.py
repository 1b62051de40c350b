"""
Domain validation for unit search filters.

Violations are returned as data so that callers can report every problem in a
single response. Nothing here raises for structurally valid input, mutates the
filters, or fills in defaults.
"""
import uuid
from typing import List, Optional, Tuple
from app.models.search import SearchFilters, NumericRange, BEDROOM_RANGE, BATHROOM_RANGE, MAX_LIMIT, MAX_OFFSET


def validate_search_filters(filters: SearchFilters, max_limit: int = MAX_LIMIT) -> List[str]:
    """Return human-readable violations; an empty list means the filters are valid"""
    errors: List[str] = []

    if not filters.community_ids:
        errors.append("At least one community must be selected")
    else:
        for community_id in filters.community_ids:
            if not _is_uuid(community_id):
                errors.append(f"Invalid community ID: {community_id}")

    errors.extend(_check_bounded_range("Bedroom", filters.bedroom_range, BEDROOM_RANGE))
    errors.extend(_check_bounded_range("Bathroom", filters.bathroom_range, BATHROOM_RANGE))
    errors.extend(_check_non_negative_range("Price", filters.price_range))
    errors.extend(_check_non_negative_range("Square feet", filters.square_feet_range))

    if filters.limit is not None and not 1 <= filters.limit <= max_limit:
        errors.append(f"Limit must be between 1 and {max_limit}")

    if filters.offset is not None and filters.offset < 0:
        errors.append("Offset must be non-negative")
    elif filters.offset is not None and filters.offset > MAX_OFFSET:
        errors.append(f"Offset must be between 0 and {MAX_OFFSET}")

    return errors


def _check_bounded_range(label: str, value_range: Optional[NumericRange],
                         domain: Tuple[int, int]) -> List[str]:
    if value_range is None:
        return []

    errors = []
    low, high = domain
    for bound_name, bound in (("min", value_range.min), ("max", value_range.max)):
        if bound is not None and not low <= bound <= high:
            errors.append(f"{label} {bound_name} must be between {low} and {high}")

    errors.extend(_check_order(label, value_range))
    return errors


def _check_non_negative_range(label: str, value_range: Optional[NumericRange]) -> List[str]:
    if value_range is None:
        return []

    errors = []
    for bound_name, bound in (("min", value_range.min), ("max", value_range.max)):
        if bound is not None and bound < 0:
            errors.append(f"{label} {bound_name} must be non-negative")

    errors.extend(_check_order(label, value_range))
    return errors


def _check_order(label: str, value_range: NumericRange) -> List[str]:
    if value_range.min is not None and value_range.max is not None and value_range.min > value_range.max:
        return [f"{label} min cannot exceed max"]
    return []


def _is_uuid(value: str) -> bool:
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True
