from typing import Any

from redis import asyncio as aioredis

from hkjobs.core.cache.backend.interface import CacheBackend


class RedisCacheBackend(CacheBackend):
    """
    Response cache shared between processes through redis.

    Entries live under `<namespace>:<key>` and tag sets under
    `<namespace>:tag:<tag>`, so `clear()` can wipe the cache without touching
    tokens stored in the same database. Without a client every call is a no-op
    and reads miss.
    """

    def __init__(
        self, redis: aioredis.Redis | None = None, *, namespace: str = "hkjobs:cache"
    ) -> None:
        self.redis: aioredis.Redis | None = redis
        self.namespace = namespace

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    def _tag_key(self, tag: str) -> str:
        return f"{self.namespace}:tag:{tag}"

    def is_initialized(self) -> bool:
        return self.redis is not None

    async def get_value(self, key: str) -> Any:
        if self.redis is None:
            return None
        return await self.redis.get(self._key(key))

    async def set_value(self, key: str, value: Any, ttl: int) -> None:
        if self.redis is not None:
            await self.redis.set(self._key(key), value, ex=ttl)

    async def delete(self, key: str) -> None:
        await self.invalidate_keys([key])

    async def add_tag(self, tag: str, key: str) -> None:
        if self.redis is not None:
            await self.redis.sadd(self._tag_key(tag), key)

    async def get_tag_members(self, tag: str) -> set[str]:
        if self.redis is None:
            return set()
        members = await self.redis.smembers(self._tag_key(tag))
        return {m.decode() if isinstance(m, bytes) else str(m) for m in members}

    async def invalidate_keys(self, keys: list[str]) -> None:
        if self.redis is None or not keys:
            return
        await self.redis.delete(*map(self._key, keys))

    async def clear(self) -> None:
        if self.redis is None:
            return
        # SCAN instead of KEYS: the database may be shared with other data.
        stale = [key async for key in self.redis.scan_iter(match=self._key("*"))]
        if stale:
            await self.redis.delete(*stale)
