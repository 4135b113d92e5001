from datetime import datetime
from typing import Any

from pydantic import Field

from hkjobs.applications.enums import ApplicationStatus, TemplateType, TimelineEventType
from hkjobs.core.schemas import Base, RequestModel
from hkjobs.documents.schemas import ApplicationDocument
from hkjobs.interviews.schemas import Interview
from hkjobs.jobs.schemas import JobListing


class ApplicationStatusHistory(Base):
    id: str
    application_id: str
    status: ApplicationStatus
    notes: str | None = None
    created_at: datetime | None = None


class JobApplication(Base):
    id: str
    user_id: str | None = None
    job_listing_id: str
    status: ApplicationStatus
    applied_at: datetime | None = None
    notes: str | None = None
    cover_letter: str | None = None
    resume_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    job_listing: JobListing | None = None
    status_history: list[ApplicationStatusHistory] = []
    interviews: list[Interview] = []
    documents: list[ApplicationDocument] = []


class ApplicationFilters(RequestModel):
    status: ApplicationStatus | None = None
    search: str | None = None
    date_from: str | None = None
    date_to: str | None = None
    job_category: str | None = None
    company: str | None = None


class CreateApplicationRequest(RequestModel):
    job_listing_id: str
    cover_letter: str | None = None
    resume_url: str | None = None
    notes: str | None = None


class UpdateApplicationRequest(RequestModel):
    status: ApplicationStatus | None = None
    cover_letter: str | None = None
    resume_url: str | None = None
    notes: str | None = None


class UpdateStatusRequest(RequestModel):
    status: ApplicationStatus
    notes: str | None = None


class BulkStatusRequest(RequestModel):
    application_ids: list[str] = Field(min_length=1)
    status: ApplicationStatus


class ApplicationStats(Base):
    total: int = 0
    by_status: dict[str, int] = {}
    recent_applications: list[JobApplication] = []
    conversion_rate: float = 0
    # Days
    average_time_to_response: float = 0


class AppliedCheck(Base):
    applied: bool
    application_id: str | None = None


class TimelineEvent(Base):
    id: str
    type: TimelineEventType
    timestamp: datetime
    data: Any = None


class ApplicationTemplate(Base):
    id: str
    name: str
    content: str
    type: TemplateType
