"""
Celery tasks for refreshing MSA demographics
"""
import asyncio
import logging
from datetime import datetime
from typing import Any, Dict

from app.core.celery_app import celery_app
from app.core.database import AsyncSessionLocal, engine
from .service import MSAService

logger = logging.getLogger(__name__)


async def _refresh_stale_demographics() -> int:
    try:
        async with AsyncSessionLocal() as db:
            service = MSAService(db)
            try:
                return await service.refresh_stale_demographics()
            finally:
                await service.close()
    finally:
        # Pooled connections belong to this event loop
        await engine.dispose()


@celery_app.task(bind=True, max_retries=3)
def refresh_stale_msa_demographics(self) -> Dict[str, Any]:
    """Background task to refresh Census demographics for every stale MSA"""
    try:
        logger.info("Starting MSA demographics refresh")

        refreshed = asyncio.run(_refresh_stale_demographics())

        result = {
            'msas_refreshed': refreshed,
            'refresh_time': datetime.now().isoformat(),
        }
        logger.info(f"Completed MSA demographics refresh: {result}")
        return result

    except Exception as e:
        logger.error(f"Error in refresh_stale_msa_demographics: {str(e)}")
        # Retry with exponential backoff
        raise self.retry(exc=e, countdown=60 * (2 ** self.request.retries))
