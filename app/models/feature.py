from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional, List
from enum import Enum


class FeatureCategory(str, Enum):
    KITCHEN = "kitchen"
    FLOORING = "flooring"
    APPLIANCES = "appliances"
    TECHNOLOGY = "technology"
    BATHROOM = "bathroom"
    OTHER = "other"


class Feature(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    category: Optional[FeatureCategory] = None
    description: Optional[str] = None
    unit_count: int = 0  # distinct units carrying this feature
    is_popular: bool = False


class FeatureListResponse(BaseModel):
    features: List[Feature]
    total: int
