from __future__ import annotations

import json
import os
from pathlib import Path
import stat

import pytest
import redis.exceptions as redis_exc

from hkjobs.core.errors.exceptions import TokenStorageException
from hkjobs.core.storage.file_backend import FileTokenStorage
from hkjobs.core.storage.memory import InMemoryTokenStorage
from hkjobs.core.storage.redis_backend import RedisTokenStorage
from tests.fakes.redis import InMemoryRedis


@pytest.fixture
def token_file(tmp_path: Path) -> Path:
    return tmp_path / "nested" / "tokens.json"


@pytest.mark.asyncio
async def test_memory_storage_roundtrip() -> None:
    storage = InMemoryTokenStorage({"hkjf_access_token": "a"})

    await storage.set("hkjf_refresh_token", "r")
    await storage.delete("hkjf_access_token", "missing")

    assert await storage.get("hkjf_access_token") is None
    assert storage.snapshot() == {"hkjf_refresh_token": "r"}


@pytest.mark.asyncio
async def test_file_storage_creates_file_with_owner_only_permissions(
    token_file: Path,
) -> None:
    storage = FileTokenStorage(token_file)

    await storage.set("hkjf_access_token", "access-1")
    await storage.set("hkjf_refresh_token", "refresh-1")

    assert json.loads(token_file.read_text()) == {
        "hkjf_access_token": "access-1",
        "hkjf_refresh_token": "refresh-1",
    }
    if os.name == "posix":
        assert stat.S_IMODE(token_file.stat().st_mode) == 0o600
    assert [p.name for p in token_file.parent.iterdir()] == ["tokens.json"]


@pytest.mark.asyncio
async def test_file_storage_get_and_delete(token_file: Path) -> None:
    storage = FileTokenStorage(token_file)
    await storage.set("hkjf_access_token", "access-1")

    assert await storage.get("hkjf_access_token") == "access-1"
    assert await storage.get("hkjf_refresh_token") is None

    await storage.delete("hkjf_access_token")

    assert await storage.get("hkjf_access_token") is None
    assert json.loads(token_file.read_text()) == {}


@pytest.mark.asyncio
async def test_file_storage_missing_file_reads_as_empty(token_file: Path) -> None:
    storage = FileTokenStorage(token_file)

    assert await storage.get("hkjf_access_token") is None
    await storage.delete("hkjf_access_token")


@pytest.mark.asyncio
async def test_file_storage_ignores_corrupted_file(token_file: Path) -> None:
    token_file.parent.mkdir(parents=True)
    token_file.write_text("{not json")
    storage = FileTokenStorage(token_file)

    assert await storage.get("hkjf_access_token") is None

    await storage.set("hkjf_access_token", "access-2")

    assert json.loads(token_file.read_text()) == {"hkjf_access_token": "access-2"}


@pytest.mark.asyncio
async def test_file_storage_ignores_non_string_values(token_file: Path) -> None:
    token_file.parent.mkdir(parents=True)
    token_file.write_text(json.dumps({"hkjf_access_token": 42}))

    assert await FileTokenStorage(token_file).get("hkjf_access_token") is None


@pytest.mark.asyncio
async def test_file_storage_wraps_write_errors(
    token_file: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr("hkjobs.core.utils.retry.time.sleep", lambda _: None)

    def failing_replace(src: str, dst: str) -> None:
        raise PermissionError("read-only")

    monkeypatch.setattr("hkjobs.core.storage.file_backend.os.replace", failing_replace)
    storage = FileTokenStorage(token_file)

    with pytest.raises(TokenStorageException, match="Cannot write token file"):
        await storage.set("hkjf_access_token", "access-1")

    assert not token_file.exists()
    assert list(token_file.parent.iterdir()) == []


@pytest.mark.asyncio
async def test_redis_storage_namespaces_keys() -> None:
    redis_client = InMemoryRedis()
    storage = RedisTokenStorage(redis_client)  # type: ignore[arg-type]

    await storage.set("hkjf_access_token", "access-1")

    assert redis_client.keys_snapshot() == {"hkjobs:hkjf_access_token"}
    assert await storage.get("hkjf_access_token") == "access-1"

    await storage.delete("hkjf_access_token")

    assert await storage.get("hkjf_access_token") is None


@pytest.mark.asyncio
async def test_redis_storage_wraps_redis_errors() -> None:
    redis_client = InMemoryRedis()
    redis_client.fail_with = redis_exc.ConnectionError("connection refused")
    storage = RedisTokenStorage(redis_client)  # type: ignore[arg-type]

    with pytest.raises(TokenStorageException, match="Cannot read tokens"):
        await storage.get("hkjf_access_token")
    with pytest.raises(TokenStorageException, match="Cannot write tokens"):
        await storage.set("hkjf_access_token", "x")
    with pytest.raises(TokenStorageException, match="Cannot delete tokens"):
        await storage.delete("hkjf_access_token")


@pytest.mark.asyncio
async def test_redis_storage_closes_only_owned_clients() -> None:
    shared, owned = InMemoryRedis(), InMemoryRedis()

    await RedisTokenStorage(shared).close()  # type: ignore[arg-type]
    await RedisTokenStorage(owned, owns_client=True).close()  # type: ignore[arg-type]

    assert shared.closed is False
    assert owned.closed is True
