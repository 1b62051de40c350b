"""
Tests for unit search against a seeded SQLite warehouse
"""
import asyncio
import pytest
from unittest.mock import AsyncMock, MagicMock
from sqlalchemy.exc import OperationalError
from app.core.exceptions import FilterValidationError, StoreUnavailable
from app.models.search import SearchFilters, NumericRange
from app.modules.search.executor import UnitSearchExecutor
from app.modules.search.query_builder import UnitQueryBuilder
from app.modules.search.service import UnitService, apply_search_defaults
from tests.conftest import OAK_ID, PINE_ID, EMPTY_ID, U1_ID, U2_ID, U3_ID, U4_ID

ALL_COMMUNITIES = [str(OAK_ID), str(PINE_ID)]


def unit_ids(response):
    return [unit.id for unit in response.units]


class TestUnitService:
    """Test cases for UnitService.search_units"""

    @pytest.mark.asyncio
    async def test_default_sort_is_community_name(self, seeded_session):
        response = await UnitService(seeded_session).search_units(
            SearchFilters(community_ids=ALL_COMMUNITIES)
        )

        assert response.total == 4
        assert unit_ids(response) == [str(U1_ID), str(U2_ID), str(U4_ID), str(U3_ID)]
        assert [unit.community_name for unit in response.units] == [
            "Oak Ridge", "Oak Ridge", "Oak Ridge", "Pine Court"
        ]
        assert response.limit == 50
        assert response.offset == 0

    @pytest.mark.asyncio
    async def test_features_require_every_name(self, seeded_session):
        service = UnitService(seeded_session)

        two = await service.search_units(SearchFilters(
            community_ids=ALL_COMMUNITIES, features=["Quartz Countertops", "Hardwood Floors"]
        ))
        three = await service.search_units(SearchFilters(
            community_ids=ALL_COMMUNITIES,
            features=["Quartz Countertops", "Hardwood Floors", "Smart Thermostat"],
        ))

        assert sorted(unit_ids(two)) == sorted([str(U1_ID), str(U2_ID)])
        assert two.total == 2
        assert unit_ids(three) == [str(U1_ID)]
        assert three.total == 1

    @pytest.mark.asyncio
    async def test_repeated_association_rows_do_not_duplicate_units(self, seeded_session):
        response = await UnitService(seeded_session).search_units(SearchFilters(
            community_ids=[str(PINE_ID)], features=["Quartz Countertops"]
        ))

        assert response.total == 1
        assert unit_ids(response) == [str(U3_ID)]
        assert response.units[0].features == ["Quartz Countertops"]

    @pytest.mark.asyncio
    async def test_duplicate_requested_features_collapse(self, seeded_session):
        response = await UnitService(seeded_session).search_units(SearchFilters(
            community_ids=ALL_COMMUNITIES, features=["Smart Thermostat", "Smart Thermostat"]
        ))

        assert unit_ids(response) == [str(U1_ID)]

    @pytest.mark.asyncio
    async def test_unknown_feature_matches_nothing(self, seeded_session):
        response = await UnitService(seeded_session).search_units(SearchFilters(
            community_ids=ALL_COMMUNITIES, features=["Private Elevator"]
        ))

        assert response.units == []
        assert response.total == 0

    @pytest.mark.asyncio
    async def test_returned_features_are_complete(self, seeded_session):
        response = await UnitService(seeded_session).search_units(SearchFilters(
            community_ids=[str(OAK_ID)], features=["Smart Thermostat"]
        ))

        assert response.units[0].features == [
            "Hardwood Floors", "Quartz Countertops", "Smart Thermostat"
        ]

    @pytest.mark.asyncio
    async def test_numeric_ranges_are_inclusive(self, seeded_session):
        response = await UnitService(seeded_session).search_units(SearchFilters(
            community_ids=ALL_COMMUNITIES,
            price_range=NumericRange(min=1234.5, max=1800),
        ))

        assert unit_ids(response) == [str(U1_ID), str(U2_ID)]
        assert response.units[0].monthly_rent == 1234.5

    @pytest.mark.asyncio
    async def test_half_bathrooms(self, seeded_session):
        response = await UnitService(seeded_session).search_units(SearchFilters(
            community_ids=ALL_COMMUNITIES, bathroom_range=NumericRange(min=2)
        ))

        assert sorted(unit_ids(response)) == sorted([str(U1_ID), str(U3_ID)])

    @pytest.mark.asyncio
    async def test_availability(self, seeded_session):
        service = UnitService(seeded_session)

        available = await service.search_units(SearchFilters(
            community_ids=ALL_COMMUNITIES, availability="available"
        ))
        everything = await service.search_units(SearchFilters(
            community_ids=ALL_COMMUNITIES, availability="all"
        ))

        assert str(U4_ID) not in unit_ids(available)
        assert available.total == 3
        assert everything.total == 4

    @pytest.mark.asyncio
    async def test_total_ignores_pagination(self, seeded_session):
        response = await UnitService(seeded_session).search_units(SearchFilters(
            community_ids=ALL_COMMUNITIES, limit=1, offset=1
        ))

        assert response.total == 4
        assert unit_ids(response) == [str(U2_ID)]

    @pytest.mark.asyncio
    async def test_offset_past_end(self, seeded_session):
        response = await UnitService(seeded_session).search_units(SearchFilters(
            community_ids=ALL_COMMUNITIES, offset=10
        ))

        assert response.units == []
        assert response.total == 4

    @pytest.mark.asyncio
    async def test_sort_by_price_descending(self, seeded_session):
        response = await UnitService(seeded_session).search_units(SearchFilters(
            community_ids=ALL_COMMUNITIES, sort_by="price", sort_order="desc"
        ))

        assert [unit.monthly_rent for unit in response.units] == [2500.0, 1800.0, 1234.5, 950.0]

    @pytest.mark.asyncio
    async def test_community_without_units(self, seeded_session):
        response = await UnitService(seeded_session).search_units(SearchFilters(
            community_ids=[str(EMPTY_ID)]
        ))

        assert response.units == []
        assert response.total == 0

    @pytest.mark.asyncio
    async def test_applied_filters_carry_defaults(self, seeded_session):
        response = await UnitService(seeded_session).search_units(SearchFilters(
            community_ids=[str(OAK_ID)], features=["Hardwood Floors"]
        ))

        assert response.applied_filters.features == ["Hardwood Floors"]
        assert response.applied_filters.limit == 50
        assert response.applied_filters.sort_by == "communityName"
        assert response.applied_filters.sort_order == "asc"

    @pytest.mark.asyncio
    async def test_huge_offset_is_a_validation_error(self, seeded_session):
        with pytest.raises(FilterValidationError) as exc_info:
            await UnitService(seeded_session).search_units(SearchFilters(
                community_ids=[str(OAK_ID)], offset=2 ** 63
            ))

        assert exc_info.value.errors == ["Offset must be between 0 and 9223372036854775807"]

    @pytest.mark.asyncio
    async def test_invalid_filters_do_not_touch_store(self):
        db = MagicMock()
        db.execute = AsyncMock()

        with pytest.raises(FilterValidationError) as exc_info:
            await UnitService(db).search_units(SearchFilters(community_ids=[], limit=0))

        assert exc_info.value.errors == [
            "At least one community must be selected",
            "Limit must be between 1 and 1000",
        ]
        db.execute.assert_not_called()


class TestApplySearchDefaults:
    """Test cases for apply_search_defaults"""

    def test_keeps_explicit_values(self):
        filters = SearchFilters(community_ids=["x"], limit=5, offset=10, sort_by="bedrooms", sort_order="desc")

        assert apply_search_defaults(filters) == filters

    def test_input_is_not_mutated(self):
        filters = SearchFilters(community_ids=["x"])

        defaulted = apply_search_defaults(filters)

        assert filters.limit is None
        assert defaulted.limit == 50
        assert defaulted.offset == 0


class TestUnitSearchExecutor:
    """Test cases for store failures in UnitSearchExecutor"""

    @pytest.fixture
    def plan(self):
        return UnitQueryBuilder().build(SearchFilters(community_ids=[str(OAK_ID)]))

    @pytest.mark.asyncio
    async def test_store_error_becomes_store_unavailable(self, plan):
        db = MagicMock()
        db.execute = AsyncMock(side_effect=OperationalError("SELECT 1", {}, Exception("connection refused")))

        with pytest.raises(StoreUnavailable):
            await UnitSearchExecutor(db).execute(plan)

    @pytest.mark.asyncio
    async def test_slow_store_times_out(self, plan):
        async def stalled(*args, **kwargs):
            await asyncio.sleep(5)

        db = MagicMock()
        db.execute = stalled

        with pytest.raises(StoreUnavailable):
            await UnitSearchExecutor(db, timeout=0.01).execute(plan)

    @pytest.mark.asyncio
    async def test_empty_page_skips_feature_lookup(self, plan):
        count_result = MagicMock()
        count_result.scalar.return_value = 0
        page_result = MagicMock()
        page_result.all.return_value = []

        db = MagicMock()
        db.execute = AsyncMock(side_effect=[count_result, page_result])

        units, total = await UnitSearchExecutor(db).execute(plan)

        assert units == []
        assert total == 0
        assert db.execute.await_count == 2
