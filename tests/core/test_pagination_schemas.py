from __future__ import annotations

from pydantic import ValidationError
import pytest

from hkjobs.core.pagination import PaginatedResponse, PaginationParams, iterate_pages
from hkjobs.core.schemas import Base


class ItemSchema(Base):
    id: int
    name: str


def _page(page: int, total_pages: int) -> PaginatedResponse[ItemSchema]:
    return PaginatedResponse[ItemSchema].model_validate(
        {
            "data": [{"id": page, "name": f"item-{page}"}],
            "total": total_pages,
            "page": page,
            "limit": 1,
            "totalPages": total_pages,
        }
    )


def test_pagination_params_validation() -> None:
    PaginationParams(page=1, limit=10)

    with pytest.raises(ValidationError):
        PaginationParams(page=0, limit=10)

    with pytest.raises(ValidationError):
        PaginationParams(page=1, limit=101)


def test_paginated_response_parses_backend_shape() -> None:
    response = _page(1, 3)

    assert isinstance(response.data[0], ItemSchema)
    assert response.total_pages == 3
    assert response.next_page == 2


def test_last_page_has_no_next_page() -> None:
    assert _page(3, 3).next_page is None
    assert _page(1, 0).next_page is None


@pytest.mark.asyncio
async def test_iterate_pages_walks_until_last_page() -> None:
    requested: list[int] = []

    async def fetch_page(page: int) -> PaginatedResponse[ItemSchema]:
        requested.append(page)
        return _page(page, 3)

    pages = [page async for page in iterate_pages(fetch_page)]

    assert requested == [1, 2, 3]
    assert [page.data[0].name for page in pages] == ["item-1", "item-2", "item-3"]


@pytest.mark.asyncio
async def test_iterate_pages_from_start_page() -> None:
    async def fetch_page(page: int) -> PaginatedResponse[ItemSchema]:
        return _page(page, 4)

    pages = [page.page async for page in iterate_pages(fetch_page, start_page=3)]

    assert pages == [3, 4]
