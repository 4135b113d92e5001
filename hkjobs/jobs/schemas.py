from datetime import datetime

from pydantic import Field

from hkjobs.core.schemas import Base, RequestModel
from hkjobs.jobs.enums import DatePosted, Trend


class JobListing(Base):
    id: str
    title: str
    company: str
    location: str | None = None
    salary_min: int | None = None
    salary_max: int | None = None
    salary_currency: str = "HKD"
    description: str = ""
    requirements: str | None = None
    benefits: str | None = None
    application_deadline: datetime | None = None
    original_url: str | None = None
    source_portal: str | None = None
    job_category: str | None = None
    employment_type: str | None = None
    experience_level: str | None = None
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None
    last_scraped_at: datetime | None = None
    scraped_count: int = 0
    content_hash: str | None = None


class JobFilters(RequestModel):
    search: str | None = None
    category: str | None = None
    location: str | None = None
    salary_min: int | None = Field(None, ge=0)
    salary_max: int | None = Field(None, ge=0)
    employment_type: str | None = None
    experience_level: str | None = None
    portal: str | None = None
    date_posted: DatePosted | None = None


class FilterOptions(Base):
    portals: list[str] = []
    categories: list[str] = []
    locations: list[str] = []
    employment_types: list[str] = []
    experience_levels: list[str] = []


class PortalCount(Base):
    source_portal: str
    count: dict[str, int] = Field(default_factory=dict, alias="_count")


class ScrapingLogEntry(Base):
    id: str
    portal: str
    status: str
    jobs_scraped: int = 0
    created_at: datetime | None = None


class ScrapingStats(Base):
    total_jobs: int = 0
    jobs_by_portal: list[PortalCount] = []
    last_update: datetime | None = None
    recent_logs: list[ScrapingLogEntry] = []


class JobDetails(Base):
    job: JobListing
    related_jobs: list[JobListing] = []


class TrendingCategory(Base):
    category: str
    count: int
    trend: Trend


class SalaryInsights(Base):
    average: float
    median: float
    percentile25: float
    percentile75: float
    currency: str


class ReportJobRequest(RequestModel):
    reason: str = Field(min_length=1)
    details: str | None = None
