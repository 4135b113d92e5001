from collections.abc import Awaitable, Callable, Iterable, Sequence
import hashlib
import json
from typing import Any

from hkjobs.core.cache.backend.interface import CacheBackend
from hkjobs.core.cache.coder.interface import Coder
from hkjobs.core.cache.coder.json_coder import JsonCoder
from hkjobs.core.cache.tags import CacheTags
from loggers import get_logger

logger = get_logger(__name__)

Tags = Iterable[str | CacheTags]


def _normalize_tags(tags: Tags) -> list[str]:
    return sorted({tag.value if isinstance(tag, CacheTags) else str(tag) for tag in tags})


class ResponseCache:
    """
    Read-through cache for backend responses.

    Values are the raw JSON documents returned by the backend, so any model
    validation runs on every hit as well. Entries are grouped by tags;
    mutations invalidate whole tags and logout clears everything.
    Backend failures are logged and behave like a miss.
    """

    def __init__(
        self,
        backend: CacheBackend,
        coder: Coder | None = None,
        *,
        ttl: int = 300,
    ) -> None:
        self.backend = backend
        self.coder = coder or JsonCoder()
        self.ttl = ttl

    @staticmethod
    def key_builder(key_parts: Sequence[Any]) -> str:
        raw = json.dumps(list(key_parts), sort_keys=True, default=str)
        cache_key = hashlib.md5(raw.encode()).hexdigest()  # noqa: S324
        return f"cache:{cache_key}"

    async def get_or_fetch(
        self,
        key_parts: Sequence[Any],
        fetch: Callable[[], Awaitable[Any]],
        *,
        tags: Tags = (),
        ttl: int | None = None,
    ) -> Any:
        if not self.backend.is_initialized():
            raise RuntimeError("Cache backend is not initialized")

        cache_key = self.key_builder(key_parts)
        try:
            cached = await self.backend.get_value(cache_key)
        except Exception:
            logger.exception("Failed to get cache for key %s", cache_key)
            cached = None

        if cached is not None:
            logger.debug("Cache hit for key: %s (%s)", cache_key, key_parts)
            return self.coder.decode(cached)

        logger.debug("Cache miss for key: %s (%s)", cache_key, key_parts)
        result = await fetch()

        try:
            await self.backend.set_value(
                cache_key, self.coder.encode(result), ttl or self.ttl
            )
            for tag in _normalize_tags(tags):
                await self.backend.add_tag(tag, cache_key)
        except Exception:
            logger.exception("Failed to set cache for key %s", cache_key)

        return result

    async def invalidate_tags(self, tags: Tags) -> None:
        """Drop every entry carrying any of `tags`."""
        keys: set[str] = set()
        for tag in _normalize_tags(tags):
            keys |= await self.backend.get_tag_members(tag)
        if keys:
            logger.debug("Invalidating %s key(s) for tags: %s", len(keys), tags)
            await self.backend.invalidate_keys(list(keys))

    async def clear(self, _payload: Any = None) -> None:
        """Drop everything. Signature fits an event handler."""
        logger.info("[ResponseCache] Clearing all cached responses")
        await self.backend.clear()
