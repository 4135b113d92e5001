import time
from typing import Any

from hkjobs.core.cache.backend.interface import CacheBackend


def _now() -> float:
    return time.monotonic()


class InMemoryCacheBackend(CacheBackend):
    """Process-local cache; entries expire lazily on read."""

    def __init__(self) -> None:
        self._store: dict[str, Any] = {}
        self._expires: dict[str, float] = {}
        self._tags: dict[str, set[str]] = {}

    def _purge_expired(self, key: str) -> None:
        expires_at = self._expires.get(key)
        if expires_at is not None and _now() >= expires_at:
            self._store.pop(key, None)
            self._expires.pop(key, None)

    async def get_value(self, key: str) -> Any:
        self._purge_expired(key)
        return self._store.get(key)

    async def set_value(self, key: str, value: Any, ttl: int) -> None:
        self._store[key] = value
        self._expires[key] = _now() + ttl

    async def delete(self, key: str) -> None:
        self._store.pop(key, None)
        self._expires.pop(key, None)

    async def add_tag(self, tag: str, key: str) -> None:
        self._tags.setdefault(tag, set()).add(key)

    async def get_tag_members(self, tag: str) -> set[str]:
        return set(self._tags.get(tag, set()))

    async def invalidate_keys(self, keys: list[str]) -> None:
        for key in keys:
            await self.delete(key)
        for members in self._tags.values():
            members.difference_update(keys)

    async def clear(self) -> None:
        self._store.clear()
        self._expires.clear()
        self._tags.clear()

    def is_initialized(self) -> bool:
        return True

    def __len__(self) -> int:
        for key in list(self._store):
            self._purge_expired(key)
        return len(self._store)
