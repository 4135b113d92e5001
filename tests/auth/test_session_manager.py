from __future__ import annotations

import asyncio
from typing import Any
from unittest.mock import AsyncMock

import pytest

from hkjobs.core.errors.exceptions import (
    AuthExpiredException,
    TokenStorageException,
    UnauthorizedException,
)
from hkjobs.core.events import AUTH_LOGOUT, EventBus
from hkjobs.core.schemas import TokenModel
from hkjobs.core.storage.memory import InMemoryTokenStorage
from hkjobs.user.auth.session import SessionManager, SessionState
from tests.factories.token_factory import make_tokens
from tests.helpers.waiting import wait_until


class GatedRefresh:
    """Refresh call that blocks until released, counting invocations."""

    def __init__(self, result: TokenModel | Exception) -> None:
        self.calls = 0
        self.gate = asyncio.Event()
        self.result = result

    async def __call__(self, refresh_token: str) -> TokenModel:
        self.calls += 1
        await self.gate.wait()
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


class BrokenStorage(InMemoryTokenStorage):
    async def set(self, key: str, value: str) -> None:
        raise TokenStorageException("disk full")

    async def delete(self, *keys: str) -> None:
        raise TokenStorageException("disk full")


@pytest.mark.asyncio
async def test_load_rehydrates_persisted_tokens() -> None:
    storage = InMemoryTokenStorage(
        {"hkjf_access_token": "access-9", "hkjf_refresh_token": "refresh-9"}
    )
    session = SessionManager(storage)

    state = await session.load()

    assert state is SessionState.AUTHENTICATED
    assert session.access_token == "access-9"
    assert session.refresh_token == "refresh-9"


@pytest.mark.asyncio
async def test_load_without_tokens_is_unauthenticated(session: SessionManager) -> None:
    assert await session.load() is SessionState.UNAUTHENTICATED
    assert session.is_authenticated is False


@pytest.mark.asyncio
async def test_set_tokens_persists_under_prefixed_keys(
    session: SessionManager, token_storage: InMemoryTokenStorage
) -> None:
    await session.set_tokens(make_tokens(1))

    assert token_storage.snapshot() == {
        "hkjf_access_token": "access-1",
        "hkjf_refresh_token": "refresh-1",
    }
    assert session.state is SessionState.AUTHENTICATED


@pytest.mark.asyncio
async def test_logout_clears_and_emits_once(
    logged_in_session: SessionManager,
    token_storage: InMemoryTokenStorage,
    events: EventBus,
) -> None:
    payloads: list[Any] = []
    events.subscribe(AUTH_LOGOUT, payloads.append)

    await logged_in_session.logout()

    assert payloads == [{"reason": "logout"}]
    assert token_storage.snapshot() == {}
    assert logged_in_session.state is SessionState.UNAUTHENTICATED


@pytest.mark.asyncio
async def test_logout_emits_even_when_storage_fails() -> None:
    handler = AsyncMock()
    session = SessionManager(BrokenStorage())
    session.subscribe_logout(handler)

    with pytest.raises(TokenStorageException):
        await session.logout()

    handler.assert_awaited_once_with({"reason": "logout"})
    assert session.access_token is None


@pytest.mark.asyncio
async def test_refresh_without_refresh_token_raises(session: SessionManager) -> None:
    refresh_call = AsyncMock()

    with pytest.raises(AuthExpiredException):
        await session.refresh(refresh_call)

    refresh_call.assert_not_awaited()


@pytest.mark.asyncio
async def test_concurrent_refreshes_share_one_call(
    logged_in_session: SessionManager,
) -> None:
    refresh = GatedRefresh(make_tokens(2))

    tasks = [asyncio.create_task(logged_in_session.refresh(refresh)) for _ in range(5)]
    await wait_until(lambda: logged_in_session.pending_count == 4)

    assert logged_in_session.is_refreshing is True
    assert logged_in_session.state is SessionState.REFRESHING

    refresh.gate.set()
    results = await asyncio.gather(*tasks)

    assert refresh.calls == 1
    assert results == ["access-2"] * 5
    assert logged_in_session.is_refreshing is False
    assert logged_in_session.pending_count == 0
    assert logged_in_session.state is SessionState.AUTHENTICATED


@pytest.mark.asyncio
async def test_failed_refresh_rejects_everyone_with_the_same_error(
    logged_in_session: SessionManager,
    token_storage: InMemoryTokenStorage,
    events: EventBus,
) -> None:
    logout_handler = AsyncMock()
    events.subscribe(AUTH_LOGOUT, logout_handler)
    cause = UnauthorizedException("Invalid refresh token", status_code=401)
    refresh = GatedRefresh(cause)

    tasks = [asyncio.create_task(logged_in_session.refresh(refresh)) for _ in range(3)]
    await wait_until(lambda: logged_in_session.pending_count == 2)
    refresh.gate.set()
    results = await asyncio.gather(*tasks, return_exceptions=True)

    assert refresh.calls == 1
    assert all(isinstance(result, AuthExpiredException) for result in results)
    assert results[0] is results[1] is results[2]
    assert results[0].__cause__ is cause
    assert token_storage.snapshot() == {}
    assert logged_in_session.access_token is None
    assert logged_in_session.state is SessionState.UNAUTHENTICATED
    logout_handler.assert_awaited_once_with({"reason": "refresh_failed"})


@pytest.mark.asyncio
async def test_waiters_are_released_in_arrival_order(
    logged_in_session: SessionManager,
) -> None:
    refresh = GatedRefresh(make_tokens(2))
    order: list[int] = []

    async def waiter(index: int) -> None:
        await logged_in_session.refresh(refresh)
        order.append(index)

    leader = asyncio.create_task(logged_in_session.refresh(refresh))
    await wait_until(lambda: refresh.calls == 1)
    waiters = [asyncio.create_task(waiter(i)) for i in range(4)]
    await wait_until(lambda: logged_in_session.pending_count == 4)

    refresh.gate.set()
    await asyncio.gather(leader, *waiters)

    assert order == [0, 1, 2, 3]


@pytest.mark.asyncio
async def test_cancelled_waiter_is_skipped_at_release(
    logged_in_session: SessionManager,
) -> None:
    refresh = GatedRefresh(make_tokens(2))

    leader = asyncio.create_task(logged_in_session.refresh(refresh))
    await wait_until(lambda: refresh.calls == 1)
    cancelled = asyncio.create_task(logged_in_session.refresh(refresh))
    survivor = asyncio.create_task(logged_in_session.refresh(refresh))
    await wait_until(lambda: logged_in_session.pending_count == 2)

    cancelled.cancel()
    refresh.gate.set()

    assert await leader == "access-2"
    assert await survivor == "access-2"
    with pytest.raises(asyncio.CancelledError):
        await cancelled


@pytest.mark.asyncio
async def test_cancelled_leader_hands_refresh_to_first_waiter(
    logged_in_session: SessionManager,
) -> None:
    refresh = GatedRefresh(make_tokens(2))

    leader = asyncio.create_task(logged_in_session.refresh(refresh))
    await wait_until(lambda: refresh.calls == 1)
    waiters = [asyncio.create_task(logged_in_session.refresh(refresh)) for _ in range(2)]
    await wait_until(lambda: logged_in_session.pending_count == 2)

    leader.cancel()
    with pytest.raises(asyncio.CancelledError):
        await leader
    await wait_until(lambda: refresh.calls == 2)

    assert logged_in_session.is_refreshing is True
    assert logged_in_session.pending_count == 1
    refresh.gate.set()
    assert await asyncio.gather(*waiters) == ["access-2", "access-2"]
    assert logged_in_session.state is SessionState.AUTHENTICATED


@pytest.mark.asyncio
async def test_logout_during_refresh_discards_new_tokens(
    logged_in_session: SessionManager,
    token_storage: InMemoryTokenStorage,
    events: EventBus,
) -> None:
    payloads: list[Any] = []
    events.subscribe(AUTH_LOGOUT, payloads.append)
    refresh = GatedRefresh(make_tokens(2))

    leader = asyncio.create_task(logged_in_session.refresh(refresh))
    await wait_until(lambda: refresh.calls == 1)
    waiter = asyncio.create_task(logged_in_session.refresh(refresh))
    await wait_until(lambda: logged_in_session.pending_count == 1)

    await logged_in_session.logout()
    refresh.gate.set()
    results = await asyncio.gather(leader, waiter, return_exceptions=True)

    assert isinstance(results[0], AuthExpiredException)
    assert results[0] is results[1]
    assert token_storage.snapshot() == {}
    assert logged_in_session.access_token is None
    assert logged_in_session.refresh_token is None
    assert logged_in_session.is_refreshing is False
    assert logged_in_session.state is SessionState.UNAUTHENTICATED
    assert payloads == [{"reason": "logout"}]


@pytest.mark.asyncio
async def test_refresh_failing_after_logout_does_not_emit_again(
    logged_in_session: SessionManager,
    events: EventBus,
) -> None:
    payloads: list[Any] = []
    events.subscribe(AUTH_LOGOUT, payloads.append)
    refresh = GatedRefresh(UnauthorizedException("Invalid refresh token", status_code=401))

    leader = asyncio.create_task(logged_in_session.refresh(refresh))
    await wait_until(lambda: refresh.calls == 1)
    await logged_in_session.logout()
    refresh.gate.set()

    with pytest.raises(AuthExpiredException):
        await leader
    assert payloads == [{"reason": "logout"}]


@pytest.mark.asyncio
async def test_refresh_succeeds_even_if_tokens_cannot_be_persisted() -> None:
    storage = BrokenStorage()
    session = SessionManager(storage)
    session._refresh_token = "refresh-1"

    token = await session.refresh(AsyncMock(return_value=make_tokens(2)))

    assert token == "access-2"
    assert session.access_token == "access-2"
    assert session.is_refreshing is False


@pytest.mark.asyncio
async def test_new_refresh_can_start_after_previous_settled(
    logged_in_session: SessionManager,
) -> None:
    first = AsyncMock(return_value=make_tokens(2))
    second = AsyncMock(return_value=make_tokens(3))

    assert await logged_in_session.refresh(first) == "access-2"
    assert await logged_in_session.refresh(second) == "access-3"

    first.assert_awaited_once_with("refresh-1")
    second.assert_awaited_once_with("refresh-2")


def test_snapshot_masks_credentials() -> None:
    session = SessionManager(InMemoryTokenStorage())
    session._access_token = "a-very-long-access-token"

    snapshot = session.snapshot()

    assert snapshot["access_token"] == "***oken"
    assert snapshot["refresh_token"] == "<none>"
    assert snapshot["pending"] == 0
