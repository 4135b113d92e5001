from datetime import datetime
from typing import Any
from urllib.parse import quote

from hkjobs.core.cache.tags import CacheTags
from hkjobs.core.pagination import DEFAULT_PAGE_SIZE, PaginatedResponse
from hkjobs.core.schemas import UpdatedCount
from hkjobs.core.services import BaseService
from hkjobs.interviews.enums import CalendarFormat, InterviewOutcome, InterviewStatus
from hkjobs.interviews.schemas import (
    CalendarEvent,
    CompleteInterviewRequest,
    CreateInterviewRequest,
    Interview,
    InterviewFeedback,
    InterviewFilters,
    InterviewStats,
    PreparationMaterials,
    RescheduleRequest,
    UpdateInterviewRequest,
)

Filters = InterviewFilters | dict[str, Any] | None


def _filter_params(filters: Filters) -> dict[str, Any]:
    if filters is None:
        return {}
    return InterviewFilters.model_validate(filters).to_payload()


class InterviewsService(BaseService):
    # Interviews are embedded in applications, so both go stale together.
    tags = (CacheTags.INTERVIEWS, CacheTags.APPLICATIONS)

    async def get_interviews(
        self, filters: Filters = None, page: int = 1, limit: int = DEFAULT_PAGE_SIZE
    ) -> PaginatedResponse[Interview]:
        params = {**_filter_params(filters), **self.page_params(page, limit)}
        data = await self._get("/interviews", params=params)
        return PaginatedResponse[Interview].model_validate(data)

    async def get_upcoming(self, days: int = 7) -> list[Interview]:
        data = await self._get("/interviews/upcoming", params={"days": days})
        return self.validate(list[Interview], data)

    async def get_interview(self, interview_id: str) -> Interview:
        return Interview.model_validate(await self._get(f"/interviews/{interview_id}"))

    async def create_interview(
        self, data: CreateInterviewRequest | dict[str, Any]
    ) -> Interview:
        body = CreateInterviewRequest.model_validate(data)
        return Interview.model_validate(
            await self._post("/interviews", json=body.to_payload())
        )

    async def update_interview(
        self, interview_id: str, data: UpdateInterviewRequest | dict[str, Any]
    ) -> Interview:
        body = UpdateInterviewRequest.model_validate(data)
        return Interview.model_validate(
            await self._patch(f"/interviews/{interview_id}", json=body.to_payload())
        )

    async def delete_interview(self, interview_id: str) -> None:
        await self._delete(
            f"/interviews/{interview_id}",
            invalidate=(*self.tags, CacheTags.REMINDERS),
        )

    async def reschedule(
        self, interview_id: str, new_date: datetime | str, reason: str | None = None
    ) -> Interview:
        body = RescheduleRequest(scheduled_at=new_date, reason=reason)
        return Interview.model_validate(
            await self._post(
                f"/interviews/{interview_id}/reschedule",
                json=body.to_payload(),
                invalidate=(*self.tags, CacheTags.REMINDERS),
            )
        )

    async def cancel(self, interview_id: str, reason: str | None = None) -> Interview:
        return Interview.model_validate(
            await self._post(
                f"/interviews/{interview_id}/cancel",
                json={"reason": reason} if reason else {},
                invalidate=(*self.tags, CacheTags.REMINDERS),
            )
        )

    async def complete(
        self,
        interview_id: str,
        notes: str | None = None,
        outcome: InterviewOutcome | str | None = None,
    ) -> Interview:
        body = CompleteInterviewRequest(notes=notes, outcome=outcome)
        return Interview.model_validate(
            await self._post(
                f"/interviews/{interview_id}/complete", json=body.to_payload()
            )
        )

    async def get_stats(self) -> InterviewStats:
        return InterviewStats.model_validate(await self._get("/interviews/stats"))

    async def get_preparation_materials(self, interview_id: str) -> PreparationMaterials:
        return PreparationMaterials.model_validate(
            await self._get(f"/interviews/{interview_id}/preparation")
        )

    async def add_feedback(
        self, interview_id: str, feedback: InterviewFeedback | dict[str, Any]
    ) -> Interview:
        body = InterviewFeedback.model_validate(feedback)
        return Interview.model_validate(
            await self._post(
                f"/interviews/{interview_id}/feedback", json=body.to_payload()
            )
        )

    async def get_calendar_events(
        self, start_date: str, end_date: str
    ) -> list[CalendarEvent]:
        data = await self._get(
            "/interviews/calendar",
            params={"startDate": start_date, "endDate": end_date},
        )
        return self.validate(list[CalendarEvent], data)

    async def export_to_calendar(
        self, interview_id: str, format: CalendarFormat | str = CalendarFormat.ICS
    ) -> bytes | Any:
        """Return the raw `.ics` body, or the backend's JSON for Google Calendar."""
        fmt = CalendarFormat(format)
        url = f"/interviews/{interview_id}/export"
        if fmt is CalendarFormat.ICS:
            return await self._get_bytes(url, params={"format": fmt})
        return await self._get(url, params={"format": fmt}, cached=False)

    async def get_company_history(self, company_name: str) -> list[Interview]:
        data = await self._get(f"/interviews/company/{quote(company_name, safe='')}")
        return self.validate(list[Interview], data)

    async def batch_update_status(
        self, interview_ids: list[str], status: InterviewStatus | str
    ) -> UpdatedCount:
        payload = await self._post(
            "/interviews/batch/status",
            json={"interviewIds": interview_ids, "status": InterviewStatus(status).value},
        )
        return UpdatedCount.model_validate(payload)
