from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional, List
from datetime import datetime


class Address(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    street: Optional[str] = None
    city: str
    state: str
    zip_code: Optional[str] = None


class Location(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class Community(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    msa_id: Optional[str] = None
    msa_name: Optional[str] = None
    address: Address
    location: Optional[Location] = None
    # Live counts over the community's unit rows
    total_units: int = 0
    available_units: int = 0
    amenities: List[str] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CommunityListResponse(BaseModel):
    communities: List[Community]
    total: int
    limit: int
    offset: int


class CommunityResponse(BaseModel):
    community: Community
