from pydantic import Field

from hkjobs.core.schemas import Base, RequestModel


class TriggerScrapingRequest(RequestModel):
    portal: str | None = None


class TriggerScrapingResponse(Base):
    message: str
    status: str


class CleanupRequest(RequestModel):
    days_old: int = Field(30, ge=1)


class CleanupResponse(Base):
    message: str
    deactivated_jobs: int = 0
