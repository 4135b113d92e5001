from abc import ABC, abstractmethod
from typing import Any


class CacheBackend(ABC):
    """
    Storage for cached API responses.

    Entries are grouped under tags (one per resource) so that a mutation can
    drop every read of that resource at once.
    """

    @abstractmethod
    async def get_value(self, key: str) -> Any:
        """Return the encoded response stored under `key`, or None."""

    @abstractmethod
    async def set_value(self, key: str, value: Any, ttl: int) -> None: ...

    @abstractmethod
    async def delete(self, key: str) -> None: ...

    @abstractmethod
    async def add_tag(self, tag: str, key: str) -> None:
        """Record `key` as a read of the resource named by `tag`."""

    @abstractmethod
    async def get_tag_members(self, tag: str) -> set[str]: ...

    @abstractmethod
    async def invalidate_keys(self, keys: list[str]) -> None: ...

    @abstractmethod
    async def clear(self) -> None:
        """Drop every cached response and tag. Called when the session ends."""

    @abstractmethod
    def is_initialized(self) -> bool: ...
