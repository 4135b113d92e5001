"""
Composition root: builds the session, HTTP client, cache and services from
configuration and owns their lifecycle.

    async with JobBoardClient.from_config(config) as client:
        await client.auth.login({"email": ..., "password": ...})
        jobs = await client.jobs.get_jobs({"category": "IT"})
"""

from typing import Any

import httpx
from redis.asyncio import Redis

from hkjobs.applications.services import ApplicationsService
from hkjobs.core.cache.backend.interface import CacheBackend
from hkjobs.core.cache.backend.memory_backend import InMemoryCacheBackend
from hkjobs.core.cache.backend.redis_backend import RedisCacheBackend
from hkjobs.core.cache.manager import ResponseCache
from hkjobs.core.events import AUTH_LOGOUT, EventBus, EventHandler, Unsubscribe
from hkjobs.core.http.client import ApiClient
from hkjobs.core.redis_client import create_redis_client
from hkjobs.core.storage.file_backend import FileTokenStorage
from hkjobs.core.storage.interface import TokenStorage
from hkjobs.core.storage.memory import InMemoryTokenStorage
from hkjobs.core.storage.redis_backend import RedisTokenStorage
from hkjobs.documents.services import DocumentsService
from hkjobs.interviews.services import InterviewsService
from hkjobs.jobs.services import JobsService
from hkjobs.main.config import Config, get_settings
from hkjobs.main.sentry import init_sentry
from hkjobs.profile.services import ProfileService
from hkjobs.reminders.services import RemindersService
from hkjobs.scraping.services import ScrapingService
from hkjobs.user.auth.services import AuthService
from hkjobs.user.auth.session import SessionManager, SessionState
from loggers import get_logger

logger = get_logger(__name__)


class JobBoardClient:
    def __init__(
        self,
        config: Config,
        *,
        events: EventBus,
        session: SessionManager,
        api: ApiClient,
        cache: ResponseCache | None = None,
        redis: Redis | None = None,
    ) -> None:
        self.config = config
        self.events = events
        self.session = session
        self.api = api
        self.cache = cache
        self._redis = redis
        self._started = False

        self.auth = AuthService(api, session, cache)
        self.jobs = JobsService(api, cache)
        self.applications = ApplicationsService(api, cache)
        self.interviews = InterviewsService(api, cache)
        self.documents = DocumentsService(api, cache)
        self.reminders = RemindersService(api, cache)
        self.profile = ProfileService(api, cache)
        self.scraping = ScrapingService(api, cache)

        if cache is not None:
            events.subscribe(AUTH_LOGOUT, cache.clear)

    @classmethod
    def from_config(
        cls,
        config: Config | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        storage: TokenStorage | None = None,
        cache_backend: CacheBackend | None = None,
    ) -> "JobBoardClient":
        """
        Wire everything from configuration. `transport`, `storage` and
        `cache_backend` override what the config would pick (tests, embedding).
        """
        config = config or get_settings()
        redis: Redis | None = None

        def shared_redis() -> Redis:
            nonlocal redis
            if redis is None:
                redis = create_redis_client(config.redis.dsn)
            return redis

        if storage is None:
            backend = config.storage.TOKEN_STORAGE_BACKEND
            if backend == "memory":
                storage = InMemoryTokenStorage()
            elif backend == "redis":
                storage = RedisTokenStorage(shared_redis())
            else:
                storage = FileTokenStorage(config.storage.storage_path)

        cache: ResponseCache | None = None
        if config.cache.CACHE_ENABLED:
            if cache_backend is None:
                cache_backend = (
                    RedisCacheBackend(shared_redis())
                    if config.cache.CACHE_BACKEND == "redis"
                    else InMemoryCacheBackend()
                )
            cache = ResponseCache(cache_backend, ttl=config.cache.CACHE_TTL_SECONDS)

        events = EventBus()
        session = SessionManager(
            storage, events, key_prefix=config.storage.TOKEN_KEY_PREFIX
        )
        api = ApiClient(
            session,
            base_url=config.api.API_BASE_URL,
            timeout=config.api.API_TIMEOUT_SECONDS,
            refresh_path=config.api.API_REFRESH_PATH,
            retry_attempts=config.retry.RETRY_ATTEMPTS,
            retry_base_delay=config.retry.RETRY_BASE_DELAY_SECONDS,
            retry_max_delay=config.retry.RETRY_MAX_DELAY_SECONDS,
            transport=transport,
        )
        logger.debug(
            "[JobBoardClient] Built for %s (storage=%s, cache=%s)",
            config.api.API_BASE_URL,
            type(storage).__name__,
            type(cache_backend).__name__ if cache else None,
        )
        return cls(config, events=events, session=session, api=api, cache=cache, redis=redis)

    async def start(self) -> SessionState:
        """Initialize error reporting and rehydrate persisted credentials."""
        if not self._started:
            init_sentry(self.config)
            self._started = True
        return await self.session.load()

    async def aclose(self) -> None:
        try:
            await self.api.aclose()
            await self.session.storage.close()
        finally:
            if self._redis is not None:
                await self._redis.aclose()
                self._redis = None
        logger.debug("[JobBoardClient] Closed")

    async def __aenter__(self) -> "JobBoardClient":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    def on_logout(self, handler: EventHandler) -> Unsubscribe:
        """Subscribe to `auth:logout`; the payload carries the reason."""
        return self.session.subscribe_logout(handler)
