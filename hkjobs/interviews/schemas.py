from datetime import datetime
from typing import Any

from pydantic import Field

from hkjobs.core.schemas import Base, RequestModel
from hkjobs.interviews.enums import InterviewOutcome, InterviewStatus, InterviewType
from hkjobs.reminders.schemas import InterviewReminder


class Interview(Base):
    id: str
    application_id: str
    type: InterviewType
    scheduled_at: datetime
    # Minutes
    duration: int | None = None
    location: str | None = None
    meeting_url: str | None = None
    interviewer_name: str | None = None
    interviewer_title: str | None = None
    notes: str | None = None
    status: InterviewStatus = InterviewStatus.SCHEDULED
    created_at: datetime | None = None
    updated_at: datetime | None = None
    # Raw application document; the applications module embeds interviews, not the reverse.
    application: dict[str, Any] | None = None
    reminders: list[InterviewReminder] = []


class InterviewFilters(RequestModel):
    status: InterviewStatus | None = None
    type: InterviewType | None = None
    date_from: str | None = None
    date_to: str | None = None
    application_id: str | None = None


class CreateInterviewRequest(RequestModel):
    application_id: str
    type: InterviewType
    scheduled_at: datetime
    duration: int | None = Field(None, gt=0)
    location: str | None = None
    meeting_url: str | None = None
    interviewer_name: str | None = None
    interviewer_title: str | None = None
    notes: str | None = None


class UpdateInterviewRequest(RequestModel):
    type: InterviewType | None = None
    scheduled_at: datetime | None = None
    duration: int | None = Field(None, gt=0)
    location: str | None = None
    meeting_url: str | None = None
    interviewer_name: str | None = None
    interviewer_title: str | None = None
    notes: str | None = None
    status: InterviewStatus | None = None


class RescheduleRequest(RequestModel):
    scheduled_at: datetime
    reason: str | None = None


class CompleteInterviewRequest(RequestModel):
    notes: str | None = None
    outcome: InterviewOutcome | None = None


class InterviewFeedback(RequestModel):
    rating: int = Field(ge=1, le=5)
    strengths: list[str] = []
    improvements: list[str] = []
    notes: str | None = None


class InterviewStats(Base):
    total: int = 0
    upcoming: int = 0
    completed: int = 0
    by_type: dict[str, int] = {}
    success_rate: float = 0


class PreparationMaterials(Base):
    company_info: Any = None
    common_questions: list[str] = []
    tips: list[str] = []
    related_experiences: list[Any] = []


class CalendarEvent(Base):
    id: str
    title: str
    start: datetime
    end: datetime
    type: InterviewType
    location: str | None = None
    meeting_url: str | None = None
