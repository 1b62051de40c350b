from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from app.api.routers.units import validation_error_detail
from app.core.database import get_db
from app.core.exceptions import ExportLimitExceeded, FilterValidationError, StoreUnavailable
from app.models.export import ExportRequest
from app.modules.export.service import ExportService
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


def get_export_service(db: AsyncSession = Depends(get_db)) -> ExportService:
    return ExportService(db)


@router.post("")
async def export_units(
    request: ExportRequest,
    export_service: ExportService = Depends(get_export_service)
):
    """
    Export the units matching a search as a CSV or JSON download.

    Accepts the same filters as unit search plus `format` and, for CSV, an
    optional list of column names.
    """
    try:
        result = await export_service.export_units(
            request.to_filters(), request.format, request.fields
        )
    except ExportLimitExceeded as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except FilterValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=validation_error_detail(e)
        )
    except StoreUnavailable as e:
        logger.error(f"Unit export failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Export is temporarily unavailable"
        )

    return Response(
        content=result.data,
        media_type=result.mime_type,
        headers={"Content-Disposition": f'attachment; filename="{result.file_name}"'}
    )
