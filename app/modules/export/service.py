from dataclasses import dataclass
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.config import settings
from app.core.exceptions import ExportLimitExceeded, FilterValidationError
from app.models.export import ExportFormat
from app.models.search import SearchFilters
from app.modules.export.formatter import format_units, unknown_export_fields
from app.modules.search.executor import UnitSearchExecutor
from app.modules.search.query_builder import UnitQueryBuilder
from app.modules.search.validation import validate_search_filters
import logging

logger = logging.getLogger(__name__)


@dataclass
class ExportResult:
    data: bytes
    file_name: str
    mime_type: str
    record_count: int


class ExportService:
    """Exports filtered units to CSV or JSON, capped at EXPORT_MAX_RECORDS"""

    def __init__(self, db: AsyncSession, max_records: Optional[int] = None):
        self.db = db
        self.max_records = max_records or settings.EXPORT_MAX_RECORDS
        self.query_builder = UnitQueryBuilder()
        self.executor = UnitSearchExecutor(db)

    async def export_units(self, filters: SearchFilters, export_format: ExportFormat,
                           fields: Optional[List[str]] = None) -> ExportResult:
        # Oversized requests are refused before the store is touched
        if filters.limit is not None and filters.limit > self.max_records:
            raise ExportLimitExceeded(filters.limit, self.max_records)

        errors = validate_search_filters(filters, max_limit=self.max_records)
        errors.extend(f"Unknown export field: {field}" for field in unknown_export_fields(fields))
        if errors:
            raise FilterValidationError(errors)

        export_filters = filters.model_copy(update={
            "limit": min(filters.limit or self.max_records, self.max_records),
            "offset": 0,
        })
        plan = self.query_builder.build(export_filters)
        units, total = await self.executor.execute(plan)

        data, file_name, mime_type = format_units(units, export_format, fields)
        logger.info(f"Exported {len(units)} of {total} matching units as {ExportFormat(export_format).value}")

        return ExportResult(
            data=data,
            file_name=file_name,
            mime_type=mime_type,
            record_count=len(units),
        )
