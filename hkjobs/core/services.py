from collections.abc import Iterable
from typing import IO, Any

from pydantic import TypeAdapter

from hkjobs.core.cache.manager import ResponseCache
from hkjobs.core.cache.tags import CacheTags
from hkjobs.core.http.client import ApiClient
from hkjobs.core.pagination import DEFAULT_PAGE_SIZE, PaginationParams
from hkjobs.core.schemas import clean_params
from loggers import get_logger

logger = get_logger(__name__)

# (filename, content) or (filename, content, content_type), as httpx accepts them
FileUpload = tuple[str, bytes | IO[bytes]] | tuple[str, bytes | IO[bytes], str]


class BaseService:
    """
    Shared plumbing for the resource services.

    Reads go through the response cache (when one is configured) under the
    service's tags and are retried with backoff. Successful mutations
    invalidate those tags, so the next read sees fresh data.
    """

    tags: tuple[CacheTags, ...] = ()

    def __init__(self, client: ApiClient, cache: ResponseCache | None = None) -> None:
        self.client = client
        self.cache = cache

    @staticmethod
    def page_params(page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> dict[str, int]:
        return PaginationParams(page=page, limit=limit).model_dump()

    @staticmethod
    def validate(type_: Any, data: Any) -> Any:
        return TypeAdapter(type_).validate_python(data)

    async def _get(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        cached: bool = True,
        tags: Iterable[CacheTags] | None = None,
    ) -> Any:
        query = clean_params(params or {})

        async def fetch() -> Any:
            return await self.client.request_json("GET", url, params=query, retry=True)

        if self.cache is None or not cached:
            return await fetch()
        return await self.cache.get_or_fetch(
            ("GET", url, query),
            fetch,
            tags=self.tags if tags is None else tags,
        )

    async def _get_bytes(self, url: str, *, params: dict[str, Any] | None = None) -> bytes:
        response = await self.client.get(url, params=clean_params(params or {}))
        return response.content

    async def _send(
        self,
        method: str,
        url: str,
        *,
        json: Any = None,
        data: dict[str, Any] | None = None,
        files: Any = None,
        invalidate: Iterable[CacheTags] | None = None,
    ) -> Any:
        result = await self.client.request_json(
            method, url, json=json, data=data, files=files
        )
        await self.invalidate(self.tags if invalidate is None else invalidate)
        return result

    async def _post(self, url: str, **kwargs: Any) -> Any:
        return await self._send("POST", url, **kwargs)

    async def _patch(self, url: str, **kwargs: Any) -> Any:
        return await self._send("PATCH", url, **kwargs)

    async def _delete(self, url: str, **kwargs: Any) -> Any:
        return await self._send("DELETE", url, **kwargs)

    async def invalidate(self, tags: Iterable[CacheTags]) -> None:
        tags = tuple(tags)
        if self.cache is None or not tags:
            return
        try:
            await self.cache.invalidate_tags(tags)
        except Exception:
            logger.exception("[%s] Failed to invalidate cache tags %s", type(self).__name__, tags)
