from typing import Any

from hkjobs.core.cache.tags import CacheTags
from hkjobs.core.pagination import DEFAULT_PAGE_SIZE, PaginatedResponse
from hkjobs.core.schemas import DeletedCount
from hkjobs.core.services import BaseService
from hkjobs.reminders.enums import ReminderType
from hkjobs.reminders.schemas import (
    BulkReminderRequest,
    CreateReminderRequest,
    InterviewReminder,
    ReminderFilters,
    ReminderHistoryEntry,
    ReminderSettings,
    ReminderTemplate,
    ReminderTestResult,
    SnoozeRequest,
    UpdateReminderRequest,
    UpdateReminderSettingsRequest,
)

Filters = ReminderFilters | dict[str, Any] | None


def _filter_params(filters: Filters) -> dict[str, Any]:
    if filters is None:
        return {}
    return ReminderFilters.model_validate(filters).to_payload()


class RemindersService(BaseService):
    tags = (CacheTags.REMINDERS,)

    async def get_reminders(
        self, filters: Filters = None, page: int = 1, limit: int = DEFAULT_PAGE_SIZE
    ) -> PaginatedResponse[InterviewReminder]:
        params = {**_filter_params(filters), **self.page_params(page, limit)}
        data = await self._get("/reminders", params=params)
        return PaginatedResponse[InterviewReminder].model_validate(data)

    async def get_upcoming(self, hours: int = 24) -> list[InterviewReminder]:
        data = await self._get("/reminders/upcoming", params={"hours": hours}, cached=False)
        return self.validate(list[InterviewReminder], data)

    async def get_reminder(self, reminder_id: str) -> InterviewReminder:
        return InterviewReminder.model_validate(await self._get(f"/reminders/{reminder_id}"))

    async def create_reminder(
        self, data: CreateReminderRequest | dict[str, Any]
    ) -> InterviewReminder:
        body = CreateReminderRequest.model_validate(data)
        payload = await self._post(
            "/reminders",
            json=body.to_payload(),
            invalidate=(CacheTags.REMINDERS, CacheTags.INTERVIEWS),
        )
        return InterviewReminder.model_validate(payload)

    async def create_multiple_reminders(
        self,
        interview_id: str,
        reminder_times: list[int],
        type: ReminderType | str = ReminderType.EMAIL,
    ) -> list[InterviewReminder]:
        """Create one reminder per offset, given in minutes before the interview."""
        body = BulkReminderRequest(
            interview_id=interview_id, reminder_times=reminder_times, type=type
        )
        payload = await self._post(
            "/reminders/bulk",
            json=body.to_payload(),
            invalidate=(CacheTags.REMINDERS, CacheTags.INTERVIEWS),
        )
        return self.validate(list[InterviewReminder], payload)

    async def update_reminder(
        self, reminder_id: str, data: UpdateReminderRequest | dict[str, Any]
    ) -> InterviewReminder:
        body = UpdateReminderRequest.model_validate(data)
        payload = await self._patch(f"/reminders/{reminder_id}", json=body.to_payload())
        return InterviewReminder.model_validate(payload)

    async def delete_reminder(self, reminder_id: str) -> None:
        await self._delete(
            f"/reminders/{reminder_id}",
            invalidate=(CacheTags.REMINDERS, CacheTags.INTERVIEWS),
        )

    async def delete_interview_reminders(self, interview_id: str) -> DeletedCount:
        payload = await self._delete(
            f"/reminders/interview/{interview_id}",
            invalidate=(CacheTags.REMINDERS, CacheTags.INTERVIEWS),
        )
        return DeletedCount.model_validate(payload)

    async def test_reminder(self, type: ReminderType | str) -> ReminderTestResult:
        payload = await self._post(
            "/reminders/test", json={"type": ReminderType(type).value}, invalidate=()
        )
        return ReminderTestResult.model_validate(payload)

    async def get_settings(self) -> ReminderSettings:
        return ReminderSettings.model_validate(await self._get("/reminders/settings"))

    async def update_settings(
        self, settings: UpdateReminderSettingsRequest | dict[str, Any]
    ) -> ReminderSettings:
        body = UpdateReminderSettingsRequest.model_validate(settings)
        payload = await self._patch("/reminders/settings", json=body.to_payload())
        return ReminderSettings.model_validate(payload)

    async def get_templates(self, type: ReminderType | str) -> list[ReminderTemplate]:
        data = await self._get("/reminders/templates", params={"type": ReminderType(type)})
        return self.validate(list[ReminderTemplate], data)

    async def mark_as_sent(self, reminder_id: str) -> InterviewReminder:
        payload = await self._post(f"/reminders/{reminder_id}/mark-sent")
        return InterviewReminder.model_validate(payload)

    async def get_history(self, days: int = 30) -> list[ReminderHistoryEntry]:
        data = await self._get("/reminders/history", params={"days": days})
        return self.validate(list[ReminderHistoryEntry], data)

    async def snooze(self, reminder_id: str, minutes: int) -> InterviewReminder:
        body = SnoozeRequest(minutes=minutes)
        payload = await self._post(
            f"/reminders/{reminder_id}/snooze", json=body.to_payload()
        )
        return InterviewReminder.model_validate(payload)
