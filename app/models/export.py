from typing import Optional, List
from enum import Enum
from app.models.search import SearchFilters


class ExportFormat(str, Enum):
    CSV = "csv"
    JSON = "json"


class ExportRequest(SearchFilters):
    """Search filters plus the output format and optional CSV columns"""
    format: ExportFormat
    fields: Optional[List[str]] = None

    def to_filters(self) -> SearchFilters:
        return SearchFilters.model_validate(
            self.model_dump(exclude={"format", "fields"})
        )
