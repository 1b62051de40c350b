from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List
from datetime import datetime
from enum import Enum


class Availability(str, Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    OFFLINE = "offline"


class Unit(BaseModel):
    """A single apartment as returned by unit search.

    Built fresh from warehouse rows for every query and never mutated.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    community_id: str
    community_name: str
    unit_number: Optional[str] = None
    bedrooms: int = Field(..., ge=0)
    bathrooms: float = Field(..., ge=0)
    square_feet: int = Field(..., ge=0)
    monthly_rent: float = Field(..., ge=0)
    features: List[str] = []
    availability: Availability
    floor_plan: Optional[str] = None
    photo_urls: List[str] = []
    floor_plan_urls: List[str] = []
    virtual_tour_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator('features')
    @classmethod
    def dedupe_features(cls, v):
        # Keep first occurrence order
        return list(dict.fromkeys(v))
