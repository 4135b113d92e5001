from __future__ import annotations

from collections.abc import AsyncIterator
import fnmatch
from typing import Any

import redis.exceptions as redis_exc


def _text(value: Any) -> str:
    return value.decode("utf-8") if isinstance(value, bytes) else str(value)


class InMemoryRedis:
    """
    The slice of redis.asyncio.Redis used by token storage and the cache.

    Values come back as str, like a client created with decode_responses=True.
    TTLs are recorded in `ttls` but never expire anything.
    """

    def __init__(self) -> None:
        self.strings: dict[str, str] = {}
        self.sets: dict[str, set[str]] = {}
        self.ttls: dict[str, int] = {}
        self.fail_with: redis_exc.RedisError | None = None
        self.closed = False

    def _maybe_fail(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    async def get(self, key: str | bytes) -> str | None:
        self._maybe_fail()
        return self.strings.get(_text(key))

    async def set(self, key: str | bytes, value: Any, *, ex: int | None = None) -> bool:
        self._maybe_fail()
        name = _text(key)
        self.strings[name] = _text(value)
        if ex is None:
            self.ttls.pop(name, None)
        else:
            self.ttls[name] = int(ex)
        return True

    async def delete(self, *keys: str | bytes) -> int:
        self._maybe_fail()
        removed = 0
        for name in map(_text, keys):
            found = self.strings.pop(name, None) is not None
            found = self.sets.pop(name, None) is not None or found
            self.ttls.pop(name, None)
            removed += found
        return removed

    async def sadd(self, key: str | bytes, *members: Any) -> int:
        self._maybe_fail()
        bucket = self.sets.setdefault(_text(key), set())
        added = {_text(member) for member in members} - bucket
        bucket |= added
        return len(added)

    async def smembers(self, key: str | bytes) -> set[str]:
        self._maybe_fail()
        return set(self.sets.get(_text(key), ()))

    async def scan_iter(self, match: str | None = None) -> AsyncIterator[str]:
        self._maybe_fail()
        for name in self.keys_snapshot():
            if match is None or fnmatch.fnmatchcase(name, match):
                yield name

    def keys_snapshot(self) -> set[str]:
        return set(self.strings) | set(self.sets)

    async def ping(self) -> bool:
        return True

    async def aclose(self) -> None:
        self.closed = True
