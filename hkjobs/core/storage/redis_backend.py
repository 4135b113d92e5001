from redis.asyncio import Redis
import redis.exceptions as redis_exc

from hkjobs.core.errors.exceptions import TokenStorageException
from hkjobs.core.storage.interface import TokenStorage


class RedisTokenStorage(TokenStorage):
    """
    Tokens shared between processes through redis.

    Keys are namespaced with `namespace` so several clients can share one
    database. The client is expected to be created with decode_responses=True.
    """

    def __init__(
        self, redis: Redis, *, namespace: str = "hkjobs", owns_client: bool = False
    ) -> None:
        self.redis = redis
        self.namespace = namespace
        self._owns_client = owns_client

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    @staticmethod
    def _normalize(value: str | bytes | None) -> str | None:
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def get(self, key: str) -> str | None:
        try:
            value = await self.redis.get(self._key(key))
        except redis_exc.RedisError as exc:
            raise TokenStorageException(
                "Cannot read tokens from redis", {"error": str(exc)}
            ) from exc
        return self._normalize(value)

    async def set(self, key: str, value: str) -> None:
        try:
            await self.redis.set(self._key(key), value)
        except redis_exc.RedisError as exc:
            raise TokenStorageException(
                "Cannot write tokens to redis", {"error": str(exc)}
            ) from exc

    async def delete(self, *keys: str) -> None:
        if not keys:
            return
        try:
            await self.redis.delete(*(self._key(key) for key in keys))
        except redis_exc.RedisError as exc:
            raise TokenStorageException(
                "Cannot delete tokens from redis", {"error": str(exc)}
            ) from exc

    async def close(self) -> None:
        if self._owns_client:
            await self.redis.aclose()
