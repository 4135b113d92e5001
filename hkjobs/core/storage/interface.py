from abc import ABC, abstractmethod


class TokenStorage(ABC):
    """Durable key/value store for session credentials."""

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Read a value, or None when the key is absent."""
        raise NotImplementedError

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Store a value under `key`, replacing any previous one."""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, *keys: str) -> None:
        """Remove the given keys; missing keys are ignored."""
        raise NotImplementedError

    async def close(self) -> None:
        """Release any underlying connection."""
        return None
