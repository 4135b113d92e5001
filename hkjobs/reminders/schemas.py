from datetime import datetime

from pydantic import Field

from hkjobs.core.schemas import Base, RequestModel
from hkjobs.reminders.enums import ReminderType


class InterviewReminder(Base):
    id: str
    interview_id: str
    reminder_time: datetime
    type: ReminderType
    is_sent: bool = False
    sent_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ReminderFilters(RequestModel):
    type: ReminderType | None = None
    is_sent: bool | None = None
    date_from: str | None = None
    date_to: str | None = None
    interview_id: str | None = None


class CreateReminderRequest(RequestModel):
    interview_id: str
    reminder_time: datetime
    type: ReminderType = ReminderType.EMAIL


class UpdateReminderRequest(RequestModel):
    reminder_time: datetime | None = None
    type: ReminderType | None = None


class BulkReminderRequest(RequestModel):
    interview_id: str
    # Minutes before the interview
    reminder_times: list[int] = Field(min_length=1)
    type: ReminderType = ReminderType.EMAIL


class ReminderSettings(Base):
    email_enabled: bool = True
    push_enabled: bool = False
    sms_enabled: bool = False
    default_reminder_times: list[int] = []
    email_address: str | None = None
    phone_number: str | None = None


class UpdateReminderSettingsRequest(RequestModel):
    email_enabled: bool | None = None
    push_enabled: bool | None = None
    sms_enabled: bool | None = None
    default_reminder_times: list[int] | None = None
    email_address: str | None = None
    phone_number: str | None = None


class ReminderTemplate(Base):
    id: str
    name: str
    subject: str | None = None
    content: str
    type: ReminderType


class ReminderHistoryEntry(Base):
    date: str
    count: int
    by_type: dict[str, int] = {}
    success_rate: float = 0


class ReminderTestResult(Base):
    sent: bool
    message: str


class SnoozeRequest(RequestModel):
    minutes: int = Field(gt=0)
