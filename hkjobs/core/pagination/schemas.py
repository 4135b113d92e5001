from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Generic, TypeVar

from pydantic import Field

from hkjobs.core.schemas import Base

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 20


class PaginationParams(Base):
    """Pagination request parameters.

    - page: page number starting from 1
    - limit: page size from 1 to 100
    """

    page: int = Field(1, ge=1)
    limit: int = Field(DEFAULT_PAGE_SIZE, ge=1, le=100)


class PaginatedResponse(Base, Generic[T]):
    """Generic paginated response container, as returned by list endpoints."""

    data: list[T]
    total: int
    page: int
    limit: int
    total_pages: int

    @property
    def next_page(self) -> int | None:
        next_page = self.page + 1
        return next_page if next_page <= self.total_pages else None


async def iterate_pages(
    fetch_page: Callable[[int], Awaitable[PaginatedResponse[T]]],
    *,
    start_page: int = 1,
) -> AsyncIterator[PaginatedResponse[T]]:
    """Yield pages from `start_page` until the backend reports no next page."""
    page: int | None = start_page
    while page is not None:
        result = await fetch_page(page)
        yield result
        page = result.next_page
