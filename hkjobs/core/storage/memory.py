from hkjobs.core.storage.interface import TokenStorage


class InMemoryTokenStorage(TokenStorage):
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._store: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self._store.get(key)

    async def set(self, key: str, value: str) -> None:
        self._store[key] = value

    async def delete(self, *keys: str) -> None:
        for key in keys:
            self._store.pop(key, None)

    def snapshot(self) -> dict[str, str]:
        return dict(self._store)
