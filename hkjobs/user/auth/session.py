"""
Session state and refresh coordination.

The SessionManager owns the credential pair, the refresh-in-progress flag and
the queue of requests waiting on an in-flight refresh. It is created by the
composition root and injected into the HTTP client, so tests can drive it in
isolation.

Invariant: at most one refresh call is in flight, whatever the number of
requests that observe a 401 concurrently. All of them share its outcome.
"""

import asyncio
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any

from hkjobs.core.errors.exceptions import AuthExpiredException, TokenStorageException
from hkjobs.core.events import AUTH_LOGOUT, EventBus, EventHandler, Unsubscribe
from hkjobs.core.schemas import TokenModel
from hkjobs.core.storage.interface import TokenStorage
from hkjobs.core.utils.security import mask_token
from loggers import get_logger

logger = get_logger(__name__)

RefreshCall = Callable[[str], Awaitable[TokenModel]]


class _LeaderCancelled(Exception):
    """The refresh leader was cancelled; a waiter should lead a new refresh."""


class SessionState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"
    REFRESHING = "refreshing"


class SessionManager:
    def __init__(
        self,
        storage: TokenStorage,
        events: EventBus | None = None,
        *,
        key_prefix: str = "hkjf",
    ) -> None:
        self.storage = storage
        self.events = events or EventBus()
        self.access_key = f"{key_prefix}_access_token"
        self.refresh_key = f"{key_prefix}_refresh_token"

        self._access_token: str | None = None
        self._refresh_token: str | None = None
        self._state = SessionState.UNAUTHENTICATED
        self._is_refreshing = False
        self._pending: list[asyncio.Future[str]] = []
        self._generation = 0

    # ----- State ----- #
    @property
    def access_token(self) -> str | None:
        return self._access_token

    @property
    def refresh_token(self) -> str | None:
        return self._refresh_token

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_authenticated(self) -> bool:
        return self._access_token is not None

    @property
    def is_refreshing(self) -> bool:
        return self._is_refreshing

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    # ----- Lifecycle ----- #
    async def load(self) -> SessionState:
        """Rehydrate credentials persisted by a previous run."""
        self._access_token = await self.storage.get(self.access_key)
        self._refresh_token = await self.storage.get(self.refresh_key)
        self._state = (
            SessionState.AUTHENTICATED
            if self._access_token
            else SessionState.UNAUTHENTICATED
        )
        logger.info(
            "[Session] Loaded from storage: state=%s access=%s",
            self._state.value,
            mask_token(self._access_token),
        )
        return self._state

    async def set_tokens(self, tokens: TokenModel) -> None:
        self._access_token = tokens.access_token
        self._refresh_token = tokens.refresh_token
        if not self._is_refreshing:
            self._state = SessionState.AUTHENTICATED
        await self.storage.set(self.access_key, tokens.access_token)
        await self.storage.set(self.refresh_key, tokens.refresh_token)
        logger.debug(
            "[Session] Tokens stored (access=%s)", mask_token(tokens.access_token)
        )

    async def clear(self) -> None:
        self._generation += 1
        self._access_token = None
        self._refresh_token = None
        self._state = SessionState.UNAUTHENTICATED
        await self.storage.delete(self.access_key, self.refresh_key)

    async def logout(self, reason: str = "logout") -> None:
        """Explicit logout: drop credentials and broadcast once."""
        try:
            await self.clear()
        finally:
            logger.info("[Session] Logged out (%s)", reason)
            await self.events.emit(AUTH_LOGOUT, {"reason": reason})

    def subscribe_logout(self, handler: EventHandler) -> Unsubscribe:
        return self.events.subscribe(AUTH_LOGOUT, handler)

    # ----- Refresh coordination ----- #
    async def refresh(self, refresh_call: RefreshCall) -> str:
        """
        Obtain a fresh access token, sharing one refresh call between callers.

        The first caller dispatches `refresh_call`; callers arriving while it
        is in flight are queued and receive the same token, or the same
        AuthExpiredException. A failed refresh ends the session: credentials
        are cleared and `auth:logout` is emitted exactly once. If the leader is
        cancelled, the first queued caller takes over the refresh.

        Returns:
            The new access token

        Raises:
            AuthExpiredException: If there is no refresh token, the refresh
                failed or the session was ended while it ran
        """
        if self._is_refreshing:
            waiter: asyncio.Future[str] = asyncio.get_running_loop().create_future()
            self._pending.append(waiter)
            logger.debug(
                "[Session] Refresh in flight, queued request (%s waiting)",
                len(self._pending),
            )
            try:
                return await waiter
            except _LeaderCancelled:
                logger.debug("[Session] Refresh leader cancelled, taking over")
                return await self.refresh(refresh_call)

        refresh_token = self._refresh_token
        if not refresh_token:
            raise AuthExpiredException("No refresh token available")

        generation = self._generation
        self._is_refreshing = True
        self._state = SessionState.REFRESHING
        logger.info("[Session] Access token rejected, refreshing")
        try:
            tokens = await refresh_call(refresh_token)
        except asyncio.CancelledError:
            self._is_refreshing = False
            self._state = (
                SessionState.AUTHENTICATED
                if self._access_token
                else SessionState.UNAUTHENTICATED
            )
            self._release(error=_LeaderCancelled())
            raise
        except Exception as exc:
            self._is_refreshing = False
            error = AuthExpiredException(
                "Session expired. Please log in again.", {"cause": repr(exc)}
            )
            if generation != self._generation:
                # Logged out meanwhile: the logout event has already gone out.
                self._release(error=error)
                raise error from exc
            # Settle synchronously so no request can queue behind a dead refresh.
            self._access_token = None
            self._refresh_token = None
            self._state = SessionState.UNAUTHENTICATED
            self._release(error=error)
            logger.error("[Session] Refresh failed: %r. Ending session", exc)
            try:
                await self.logout(reason="refresh_failed")
            except TokenStorageException:
                logger.exception("[Session] Could not remove persisted tokens")
            raise error from exc

        if generation != self._generation:
            self._is_refreshing = False
            error = AuthExpiredException("Session ended while refreshing")
            self._release(error=error)
            logger.info("[Session] Discarding refreshed tokens after logout")
            raise error

        try:
            await self.set_tokens(tokens)
        except TokenStorageException:
            logger.exception("[Session] Could not persist refreshed tokens")
        self._state = SessionState.AUTHENTICATED
        self._is_refreshing = False
        self._release(token=tokens.access_token)
        logger.info(
            "[Session] Refresh succeeded (access=%s)", mask_token(tokens.access_token)
        )
        return tokens.access_token

    def _release(
        self, *, token: str | None = None, error: BaseException | None = None
    ) -> None:
        """Settle every queued waiter in FIFO order, within one synchronous turn."""
        pending, self._pending = self._pending, []
        for waiter in pending:
            if waiter.done():
                continue
            if error is not None:
                waiter.set_exception(error)
            else:
                waiter.set_result(token)  # type: ignore[arg-type]

    def snapshot(self) -> dict[str, Any]:
        return {
            "state": self._state.value,
            "access_token": mask_token(self._access_token),
            "refresh_token": mask_token(self._refresh_token),
            "is_refreshing": self._is_refreshing,
            "pending": len(self._pending),
        }
