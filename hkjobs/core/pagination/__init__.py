"""Pagination-related schemas and utilities."""

from .schemas import (
    DEFAULT_PAGE_SIZE,
    PaginatedResponse,
    PaginationParams,
    iterate_pages,
)

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "PaginatedResponse",
    "PaginationParams",
    "iterate_pages",
]
