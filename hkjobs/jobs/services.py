from typing import Any

from hkjobs.core.cache.tags import CacheTags
from hkjobs.core.pagination import DEFAULT_PAGE_SIZE, PaginatedResponse
from hkjobs.core.services import BaseService
from hkjobs.jobs.enums import JobSortBy
from hkjobs.jobs.schemas import (
    FilterOptions,
    JobDetails,
    JobFilters,
    JobListing,
    ReportJobRequest,
    SalaryInsights,
    ScrapingStats,
    TrendingCategory,
)

Filters = JobFilters | dict[str, Any] | None


def _filter_params(filters: Filters) -> dict[str, Any]:
    if filters is None:
        return {}
    return JobFilters.model_validate(filters).to_payload()


class JobsService(BaseService):
    tags = (CacheTags.JOBS,)

    async def get_jobs(
        self, filters: Filters = None, page: int = 1, limit: int = DEFAULT_PAGE_SIZE
    ) -> PaginatedResponse[JobListing]:
        params = {**_filter_params(filters), **self.page_params(page, limit)}
        data = await self._get("/jobs", params=params)
        return PaginatedResponse[JobListing].model_validate(data)

    async def get_job(self, job_id: str) -> JobListing:
        return JobListing.model_validate(await self._get(f"/jobs/{job_id}"))

    async def get_filter_options(self) -> FilterOptions:
        return FilterOptions.model_validate(await self._get("/jobs/filters/options"))

    async def get_stats(self) -> ScrapingStats:
        return ScrapingStats.model_validate(
            await self._get("/jobs/stats/overview", tags=(CacheTags.JOBS, CacheTags.SCRAPING))
        )

    async def search_jobs(
        self,
        filters: Filters = None,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
        sort_by: JobSortBy | str | None = None,
    ) -> PaginatedResponse[JobListing]:
        params = {
            **_filter_params(filters),
            **self.page_params(page, limit),
            "sortBy": JobSortBy(sort_by) if sort_by else None,
        }
        data = await self._get("/jobs", params=params)
        return PaginatedResponse[JobListing].model_validate(data)

    async def get_job_details(self, job_id: str) -> JobDetails:
        return JobDetails.model_validate(await self._get(f"/jobs/{job_id}/details"))

    async def get_trending_categories(self) -> list[TrendingCategory]:
        data = await self._get("/jobs/trending/categories")
        return self.validate(list[TrendingCategory], data)

    async def get_salary_insights(
        self, category: str | None = None, location: str | None = None
    ) -> SalaryInsights:
        data = await self._get(
            "/jobs/insights/salary", params={"category": category, "location": location}
        )
        return SalaryInsights.model_validate(data)

    async def mark_as_viewed(self, job_id: str) -> None:
        await self._post(f"/jobs/{job_id}/view", invalidate=())

    async def get_recently_viewed(self, limit: int = 10) -> list[JobListing]:
        # Changes with every view; not worth caching.
        data = await self._get("/jobs/recently-viewed", params={"limit": limit}, cached=False)
        return self.validate(list[JobListing], data)

    async def get_recommendations(self, limit: int = DEFAULT_PAGE_SIZE) -> list[JobListing]:
        data = await self._get(
            "/jobs/recommendations",
            params={"limit": limit},
            tags=(CacheTags.JOBS, CacheTags.PROFILE),
        )
        return self.validate(list[JobListing], data)

    async def report_job(self, job_id: str, reason: str, details: str | None = None) -> None:
        data = ReportJobRequest(reason=reason, details=details)
        await self._post(f"/jobs/{job_id}/report", json=data.to_payload(), invalidate=())

    async def get_company_jobs(
        self, company_name: str, page: int = 1, limit: int = DEFAULT_PAGE_SIZE
    ) -> PaginatedResponse[JobListing]:
        params = {"company": company_name, **self.page_params(page, limit)}
        data = await self._get("/jobs", params=params)
        return PaginatedResponse[JobListing].model_validate(data)
