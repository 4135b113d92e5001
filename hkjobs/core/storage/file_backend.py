import asyncio
import json
import os
from pathlib import Path
import tempfile

from hkjobs.core.errors.exceptions import TokenStorageException
from hkjobs.core.storage.interface import TokenStorage
from hkjobs.core.utils.retry import with_retries
from loggers import get_logger

logger = get_logger(__name__)


class FileTokenStorage(TokenStorage):
    """
    Tokens kept in a small JSON document on disk.

    Every write replaces the whole file atomically (temp file + os.replace)
    and is restricted to the owner. Disk I/O runs in a worker thread so the
    event loop never blocks.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    async def get(self, key: str) -> str | None:
        data = await asyncio.to_thread(self._read)
        value = data.get(key)
        return value if isinstance(value, str) else None

    async def set(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._update, {key: value}, ())

    async def delete(self, *keys: str) -> None:
        if keys:
            await asyncio.to_thread(self._update, {}, keys)

    def _read(self) -> dict[str, object]:
        if not self.path.exists():
            return {}
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise TokenStorageException(
                f"Cannot read token file {self.path}", {"error": str(exc)}
            ) from exc
        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(
                "[FileTokenStorage] Corrupted token file %s, ignoring it", self.path
            )
            return {}
        return data if isinstance(data, dict) else {}

    def _update(self, updates: dict[str, str], removals: tuple[str, ...]) -> None:
        data = self._read()
        data.update(updates)
        for key in removals:
            data.pop(key, None)
        try:
            self._write(data)
        except OSError as exc:
            raise TokenStorageException(
                f"Cannot write token file {self.path}", {"error": str(exc)}
            ) from exc

    @with_retries(max_retries=3, delay=0.05)
    def _write(self, data: dict[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", dir=str(self.path.parent)
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                json.dump(data, tmp)
            os.chmod(tmp_name, 0o600)
            os.replace(tmp_name, self.path)
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
