from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional, List
from datetime import datetime


class CensusDemographics(BaseModel):
    """ACS 5-year figures for one metro area"""
    population: Optional[int] = None
    median_income: Optional[int] = None
    housing_units: Optional[int] = None
    rental_vacancy_rate: Optional[float] = None

    def is_empty(self) -> bool:
        return all(value is None for value in self.model_dump().values())


class MSA(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    code: str
    name: str
    state: str
    population: Optional[int] = None
    median_income: Optional[int] = None
    housing_units: Optional[int] = None
    rental_vacancy_rate: Optional[float] = None
    last_updated: Optional[datetime] = None
    community_count: int = 0


class MSAListResponse(BaseModel):
    msas: List[MSA]
    total: int


class MSAResponse(BaseModel):
    msa: MSA
