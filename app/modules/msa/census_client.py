"""
US Census Bureau client for metro area demographics (ACS 5-year estimates)
"""
import logging
from datetime import datetime
from typing import Any, List, Optional
import httpx
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type
from app.core.config import settings
from app.models.msa import CensusDemographics


logger = logging.getLogger(__name__)

# Total population, median household income, housing units, rental vacancy
CENSUS_VARIABLES = ["B01003_001E", "B19013_001E", "B25001_001E", "B25004_008E"]
MSA_GEOGRAPHY = "metropolitan statistical area/micropolitan statistical area"


def _parse_int(value: Any) -> Optional[int]:
    try:
        number = int(float(value))
    except (TypeError, ValueError):
        return None
    # Census marks unavailable estimates with large negative sentinels
    return number if number >= 0 else None


def _parse_float(value: Any) -> Optional[float]:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if number >= 0 else None


class CensusClient:
    """Fetches ACS demographics for a metro area by its CBSA code"""

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None,
                 client: Optional[httpx.AsyncClient] = None):
        self.api_key = api_key if api_key is not None else settings.CENSUS_API_KEY
        self.base_url = (base_url or settings.CENSUS_API_URL).rstrip("/")
        self.client = client or httpx.AsyncClient(
            timeout=30.0,
            limits=httpx.Limits(max_keepalive_connections=5, max_connections=10)
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self):
        await self.client.aclose()

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=4, max=10),
        retry=retry_if_exception_type((httpx.RequestError, httpx.HTTPStatusError)),
        reraise=True
    )
    async def _make_request(self, url: str, params: dict) -> httpx.Response:
        """Make HTTP request with retry logic"""
        try:
            response = await self.client.get(url, params=params)
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error {e.response.status_code} for {url}: {e.response.text}")
            raise
        except httpx.RequestError as e:
            logger.error(f"Request error for {url}: {str(e)}")
            raise

    async def fetch_msa_demographics(self, msa_code: str) -> CensusDemographics:
        """
        Fetch population, income, housing and vacancy figures for one MSA.

        Returns empty demographics when no API key is configured. Raises
        ValueError when the Census API answers with something other than a
        header row followed by a value row.
        """
        if not self.api_key:
            logger.warning("CENSUS_API_KEY not configured, skipping demographic fetch")
            return CensusDemographics()

        year = datetime.now().year - 2  # most recent published ACS release
        url = f"{self.base_url}/{year}/acs/acs5"
        params = {
            "get": ",".join(["NAME"] + CENSUS_VARIABLES),
            "for": f"{MSA_GEOGRAPHY}:{msa_code}",
            "key": self.api_key,
        }

        response = await self._make_request(url, params)
        try:
            rows = response.json()
        except ValueError as e:
            raise ValueError(f"Invalid response from Census API for MSA {msa_code}") from e

        return self._parse_rows(rows, msa_code)

    def _parse_rows(self, rows: Any, msa_code: str) -> CensusDemographics:
        # [[headers], [values]]
        if not isinstance(rows, list) or len(rows) < 2 or len(rows[1]) < 5:
            raise ValueError(f"Invalid response from Census API for MSA {msa_code}")

        values: List[Any] = rows[1]
        return CensusDemographics(
            population=_parse_int(values[1]),
            median_income=_parse_int(values[2]),
            housing_units=_parse_int(values[3]),
            rental_vacancy_rate=_parse_float(values[4]),
        )
