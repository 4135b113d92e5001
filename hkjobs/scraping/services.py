from typing import Any

from hkjobs.core.cache.tags import CacheTags
from hkjobs.core.services import BaseService
from hkjobs.scraping.schemas import (
    CleanupRequest,
    CleanupResponse,
    TriggerScrapingRequest,
    TriggerScrapingResponse,
)
from loggers import get_logger

logger = get_logger(__name__)


class ScrapingService(BaseService):
    """Manual control of the backend scrapers. Every run changes the job listings."""

    tags = (CacheTags.SCRAPING, CacheTags.JOBS)

    async def trigger(self, portal: str | None = None) -> TriggerScrapingResponse:
        data = TriggerScrapingRequest(portal=portal)
        payload = await self._post("/scraping/trigger", json=data.to_payload())
        logger.info("[ScrapingService] Scraping triggered for %s", portal or "all portals")
        return TriggerScrapingResponse.model_validate(payload)

    async def get_status(self) -> Any:
        return await self._get("/scraping/status", cached=False)

    async def cleanup(self, days_old: int = 30) -> CleanupResponse:
        data = CleanupRequest(days_old=days_old)
        payload = await self._post("/scraping/cleanup", json=data.to_payload())
        result = CleanupResponse.model_validate(payload)
        logger.info("[ScrapingService] Cleanup deactivated %s job(s)", result.deactivated_jobs)
        return result
