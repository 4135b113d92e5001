from collections.abc import AsyncGenerator
import os

import pytest
import pytest_asyncio

from hkjobs.core.cache.backend.memory_backend import InMemoryCacheBackend
from hkjobs.core.cache.manager import ResponseCache
from hkjobs.core.events import EventBus
from hkjobs.core.http.client import ApiClient
from hkjobs.core.storage.memory import InMemoryTokenStorage
from hkjobs.main.client import JobBoardClient
from hkjobs.main.config import Config, build_config, get_settings
from hkjobs.user.auth.session import SessionManager
from tests.factories.token_factory import make_tokens
from tests.fakes.backend import BASE_URL, FakeBackend


@pytest.fixture(scope="session")
def settings() -> Config:
    os.environ.setdefault("TESTING", "true")
    get_settings.cache_clear()
    return get_settings()


@pytest.fixture
def test_config() -> Config:
    return build_config(
        {
            "TESTING": "true",
            "API_BASE_URL": BASE_URL,
            "RETRY_BASE_DELAY_SECONDS": "0",
            "RETRY_MAX_DELAY_SECONDS": "0",
            "TOKEN_STORAGE_BACKEND": "memory",
            "CACHE_BACKEND": "memory",
        }
    )


@pytest.fixture
def fake_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def token_storage() -> InMemoryTokenStorage:
    return InMemoryTokenStorage()


@pytest.fixture
def events() -> EventBus:
    return EventBus()


@pytest.fixture
def session(token_storage: InMemoryTokenStorage, events: EventBus) -> SessionManager:
    return SessionManager(token_storage, events)


@pytest_asyncio.fixture
async def logged_in_session(session: SessionManager) -> SessionManager:
    await session.set_tokens(make_tokens(1))
    return session


@pytest.fixture
def response_cache() -> ResponseCache:
    return ResponseCache(InMemoryCacheBackend(), ttl=60)


@pytest_asyncio.fixture
async def api_client(
    session: SessionManager, fake_backend: FakeBackend
) -> AsyncGenerator[ApiClient]:
    client = ApiClient(
        session,
        base_url=BASE_URL,
        retry_base_delay=0,
        retry_max_delay=0,
        transport=fake_backend.transport(),
    )
    yield client
    await client.aclose()


@pytest_asyncio.fixture
async def board(
    test_config: Config,
    fake_backend: FakeBackend,
    token_storage: InMemoryTokenStorage,
) -> AsyncGenerator[JobBoardClient]:
    client = JobBoardClient.from_config(
        test_config, transport=fake_backend.transport(), storage=token_storage
    )
    async with client:
        yield client
