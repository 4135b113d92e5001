from typing import Any

from hkjobs.applications.enums import ApplicationStatus
from hkjobs.applications.schemas import (
    ApplicationFilters,
    ApplicationStats,
    ApplicationTemplate,
    AppliedCheck,
    BulkStatusRequest,
    CreateApplicationRequest,
    JobApplication,
    TimelineEvent,
    UpdateApplicationRequest,
    UpdateStatusRequest,
)
from hkjobs.core.cache.tags import CacheTags
from hkjobs.core.pagination import DEFAULT_PAGE_SIZE, PaginatedResponse
from hkjobs.core.schemas import UpdatedCount
from hkjobs.core.services import BaseService
from loggers import get_logger

logger = get_logger(__name__)

Filters = ApplicationFilters | dict[str, Any] | None


def _filter_params(filters: Filters) -> dict[str, Any]:
    if filters is None:
        return {}
    return ApplicationFilters.model_validate(filters).to_payload()


class ApplicationsService(BaseService):
    tags = (CacheTags.APPLICATIONS,)

    async def get_applications(
        self, filters: Filters = None, page: int = 1, limit: int = DEFAULT_PAGE_SIZE
    ) -> PaginatedResponse[JobApplication]:
        params = {**_filter_params(filters), **self.page_params(page, limit)}
        data = await self._get("/applications", params=params)
        return PaginatedResponse[JobApplication].model_validate(data)

    async def get_application(self, application_id: str) -> JobApplication:
        return JobApplication.model_validate(
            await self._get(f"/applications/{application_id}")
        )

    async def create_application(
        self, data: CreateApplicationRequest | dict[str, Any]
    ) -> JobApplication:
        body = CreateApplicationRequest.model_validate(data)
        payload = await self._post("/applications", json=body.to_payload())
        application = JobApplication.model_validate(payload)
        logger.info(
            "[ApplicationsService] Application %s created for job %s",
            application.id,
            application.job_listing_id,
        )
        return application

    async def update_application(
        self, application_id: str, data: UpdateApplicationRequest | dict[str, Any]
    ) -> JobApplication:
        body = UpdateApplicationRequest.model_validate(data)
        payload = await self._patch(
            f"/applications/{application_id}", json=body.to_payload()
        )
        return JobApplication.model_validate(payload)

    async def delete_application(self, application_id: str) -> None:
        await self._delete(f"/applications/{application_id}")

    async def update_status(
        self,
        application_id: str,
        status: ApplicationStatus | str,
        notes: str | None = None,
    ) -> JobApplication:
        body = UpdateStatusRequest(status=status, notes=notes)
        payload = await self._post(
            f"/applications/{application_id}/status", json=body.to_payload()
        )
        return JobApplication.model_validate(payload)

    async def add_note(self, application_id: str, note: str) -> JobApplication:
        payload = await self._post(
            f"/applications/{application_id}/notes", json={"note": note}
        )
        return JobApplication.model_validate(payload)

    async def get_stats(self) -> ApplicationStats:
        return ApplicationStats.model_validate(await self._get("/applications/stats"))

    async def check_if_applied(self, job_listing_id: str) -> AppliedCheck:
        return AppliedCheck.model_validate(
            await self._get(f"/applications/check/{job_listing_id}")
        )

    async def get_timeline(self, application_id: str) -> list[TimelineEvent]:
        data = await self._get(
            f"/applications/{application_id}/timeline",
            tags=(
                CacheTags.APPLICATIONS,
                CacheTags.INTERVIEWS,
                CacheTags.DOCUMENTS,
            ),
        )
        return self.validate(list[TimelineEvent], data)

    async def bulk_update_status(
        self, application_ids: list[str], status: ApplicationStatus | str
    ) -> UpdatedCount:
        body = BulkStatusRequest(application_ids=application_ids, status=status)
        payload = await self._post("/applications/bulk/status", json=body.to_payload())
        return UpdatedCount.model_validate(payload)

    async def export_to_csv(self, filters: Filters = None) -> bytes:
        return await self._get_bytes("/applications/export", params=_filter_params(filters))

    async def get_templates(self) -> list[ApplicationTemplate]:
        data = await self._get("/applications/templates")
        return self.validate(list[ApplicationTemplate], data)

    async def save_draft(
        self, data: CreateApplicationRequest | dict[str, Any]
    ) -> JobApplication:
        body = CreateApplicationRequest.model_validate(data)
        payload = await self._post("/applications/draft", json=body.to_payload())
        return JobApplication.model_validate(payload)
