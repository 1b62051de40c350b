"""
Tests for MSA statistics, the Census client and the refresh task
"""
import uuid
from datetime import datetime, timedelta, timezone
import httpx
import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from app.db.models import MSA as MSADB
from app.models.msa import CensusDemographics
from app.modules.msa.census_client import CensusClient
from app.modules.msa.service import MSAService
from app.modules.msa.tasks import refresh_stale_msa_demographics

CENSUS_ROWS = [
    ["NAME", "B01003_001E", "B19013_001E", "B25001_001E", "B25004_008E",
     "metropolitan statistical area/micropolitan statistical area"],
    ["Austin-Round Rock-Georgetown, TX Metro Area", "2352426", "89415", "985432", "5.4", "12420"],
]


def make_census_client(demographics=None, error=None):
    client = MagicMock()
    client.fetch_msa_demographics = AsyncMock(return_value=demographics, side_effect=error)
    client.aclose = AsyncMock()
    return client


class TestCensusClient:
    """Test cases for CensusClient"""

    @pytest.mark.asyncio
    async def test_fetch_demographics(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json=CENSUS_ROWS)

        client = CensusClient(
            api_key="test-key",
            base_url="https://census.test/data",
            client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        )
        async with client:
            demographics = await client.fetch_msa_demographics("12420")

        assert demographics == CensusDemographics(
            population=2352426, median_income=89415, housing_units=985432, rental_vacancy_rate=5.4
        )
        request = requests[0]
        assert request.url.path == f"/data/{datetime.now().year - 2}/acs/acs5"
        assert request.url.params["key"] == "test-key"
        assert request.url.params["for"].endswith(":12420")
        assert "B25004_008E" in request.url.params["get"]

    @pytest.mark.asyncio
    async def test_missing_api_key_skips_request(self):
        handler = MagicMock()
        client = CensusClient(
            api_key="", client=httpx.AsyncClient(transport=httpx.MockTransport(handler))
        )

        demographics = await client.fetch_msa_demographics("12420")

        assert demographics.is_empty()
        handler.assert_not_called()
        await client.aclose()

    @pytest.mark.asyncio
    async def test_invalid_response(self):
        client = CensusClient(
            api_key="test-key",
            client=httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200, json=[]))),
        )

        with pytest.raises(ValueError):
            await client.fetch_msa_demographics("12420")
        await client.aclose()

    def test_negative_sentinels_are_dropped(self):
        client = CensusClient(api_key="test-key", client=MagicMock())
        rows = [CENSUS_ROWS[0], ["Somewhere", "1200", "-666666666", "null", "-888888888", "99999"]]

        demographics = client._parse_rows(rows, "99999")

        assert demographics.population == 1200
        assert demographics.median_income is None
        assert demographics.housing_units is None
        assert demographics.rental_vacancy_rate is None


class TestMSAService:
    """Test cases for MSAService"""

    @pytest.mark.asyncio
    async def test_list_with_community_counts(self, seeded_session):
        msas = await MSAService(seeded_session, make_census_client()).get_all_msas()

        assert len(msas) == 1
        assert msas[0].code == "12420"
        assert msas[0].community_count == 2

    @pytest.mark.asyncio
    async def test_fresh_demographics_are_not_refetched(self, seeded_session):
        census = make_census_client()

        msa = await MSAService(seeded_session, census).get_msa_by_code("12420")

        assert msa.population == 2352426
        assert msa.community_count == 2
        census.fetch_msa_demographics.assert_not_called()

    @pytest.mark.asyncio
    async def test_force_refresh_updates_store(self, seeded_session):
        census = make_census_client(CensusDemographics(
            population=2400000, median_income=91000, housing_units=990000, rental_vacancy_rate=6.1
        ))

        msa = await MSAService(seeded_session, census).get_msa_by_code("12420", force_refresh=True)

        census.fetch_msa_demographics.assert_awaited_once_with("12420")
        assert msa.population == 2400000
        assert msa.rental_vacancy_rate == pytest.approx(6.1)
        assert msa.last_updated.replace(tzinfo=timezone.utc) > datetime.now(timezone.utc) - timedelta(minutes=5)

    @pytest.mark.asyncio
    async def test_census_failure_returns_stored_values(self, seeded_session):
        census = make_census_client(error=httpx.ConnectError("census unreachable"))

        msa = await MSAService(seeded_session, census).get_msa_by_code("12420", force_refresh=True)

        assert msa.population == 2352426
        assert msa.median_income == 89415

    @pytest.mark.asyncio
    async def test_empty_demographics_leave_store_untouched(self, seeded_session):
        census = make_census_client(CensusDemographics())
        service = MSAService(seeded_session, census)
        before = await service.get_msa_by_code("12420")

        after = await service.get_msa_by_code("12420", force_refresh=True)

        assert after.last_updated == before.last_updated
        assert after.population == 2352426

    @pytest.mark.asyncio
    async def test_unknown_code(self, seeded_session):
        census = make_census_client()

        assert await MSAService(seeded_session, census).get_msa_by_code("00000") is None
        census.fetch_msa_demographics.assert_not_called()

    @pytest.mark.asyncio
    async def test_refresh_stale_demographics(self, seeded_session):
        seeded_session.add(MSADB(id=uuid.uuid4(), code="19100", name="Dallas-Fort Worth-Arlington, TX", state="TX"))
        seeded_session.add(MSADB(
            id=uuid.uuid4(), code="26420", name="Houston-The Woodlands-Sugar Land, TX", state="TX",
            last_updated=datetime.now(timezone.utc) - timedelta(days=400),
        ))
        await seeded_session.commit()
        census = make_census_client(CensusDemographics(population=100))

        refreshed = await MSAService(seeded_session, census).refresh_stale_demographics()

        assert refreshed == 2
        refreshed_codes = sorted(call.args[0] for call in census.fetch_msa_demographics.await_args_list)
        assert refreshed_codes == ["19100", "26420"]

    def test_needs_refresh(self):
        service = MSAService(MagicMock(), make_census_client())
        now = datetime.now(timezone.utc)

        assert service._needs_refresh(None) is True
        assert service._needs_refresh(now - timedelta(days=366)) is True
        assert service._needs_refresh(now - timedelta(days=10)) is False
        assert service._needs_refresh((now - timedelta(days=10)).replace(tzinfo=None)) is False


class TestRefreshTask:
    """Test cases for the Celery refresh task"""

    def test_refresh_task(self):
        def fake_run(coro):
            coro.close()
            return 3

        with patch('app.modules.msa.tasks.asyncio.run', side_effect=fake_run):
            result = refresh_stale_msa_demographics.run()

        assert result['msas_refreshed'] == 3
        assert 'refresh_time' in result

    def test_refresh_task_failure_is_raised(self):
        def failing_run(coro):
            coro.close()
            raise RuntimeError("database unavailable")

        with patch('app.modules.msa.tasks.asyncio.run', side_effect=failing_run):
            with pytest.raises(RuntimeError):
                refresh_stale_msa_demographics.run()
