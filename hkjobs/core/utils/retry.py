import asyncio
from collections.abc import Callable
from functools import wraps
import inspect
import time
from typing import Any, TypeVar, cast

from hkjobs.core.errors.exceptions import NetworkException, ServerErrorException
from loggers import get_logger

logger = get_logger(__name__)


F = TypeVar("F", bound=Callable[..., Any])
RetryPredicate = Callable[[BaseException], bool]
DelayPolicy = Callable[[int], float]


def is_transient(exc: BaseException) -> bool:
    """
    Whether a failure is worth retrying with backoff.

    Only connection-level failures and 5xx responses qualify. 401 belongs to
    the refresh coordinator, 429 carries its own hint for the caller, and
    other 4xx will not change on retry.
    """
    return isinstance(exc, (NetworkException, ServerErrorException))


def backoff_delay(attempt: int, base_delay: float, max_delay: float) -> float:
    """Delay before the attempt following `attempt` (1-based): base * 2**(attempt-1), capped."""
    return min(base_delay * (2 ** (attempt - 1)), max_delay)


def _retrying(attempts: int, delay_for: DelayPolicy, retry_on: RetryPredicate) -> Callable[[F], F]:
    def decorator(func: F) -> F:
        def should_retry(attempt: int, exc: Exception) -> bool:
            if attempt >= attempts or not retry_on(exc):
                return False
            logger.warning(
                "[RETRY] '%s' attempt %s/%s failed: %s. Retrying in %ss",
                func.__name__,
                attempt,
                attempts,
                exc,
                delay_for(attempt),
            )
            return True

        if inspect.iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                attempt = 1
                while True:
                    try:
                        return await func(*args, **kwargs)
                    except Exception as e:
                        if not should_retry(attempt, e):
                            raise
                    await asyncio.sleep(delay_for(attempt))
                    attempt += 1

            return cast(F, async_wrapper)

        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            attempt = 1
            while True:
                try:
                    return func(*args, **kwargs)
                except Exception as e:
                    if not should_retry(attempt, e):
                        raise
                time.sleep(delay_for(attempt))
                attempt += 1

        return cast(F, sync_wrapper)

    return decorator


def with_backoff(
    attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    retry_on: RetryPredicate = is_transient,
) -> Callable[[F], F]:
    """
    Retry decorator with exponential backoff for async and sync functions.

    The wrapped function runs at most `attempts` times. Between attempts it
    sleeps `base_delay`, then twice that, and so on up to `max_delay`.
    Exceptions for which `retry_on` returns False are raised immediately.

    Args:
        attempts (int): Total number of attempts, including the first. Default is 3.
        base_delay (float): Delay in seconds before the second attempt. Default is 1.
        max_delay (float): Upper bound for any single delay. Default is 30.
        retry_on (Callable): Predicate deciding whether an exception is retryable.

    Example:
        @with_backoff(attempts=5, base_delay=0.5)
        async def fetch_jobs(): ...
    """
    return _retrying(
        attempts,
        lambda attempt: backoff_delay(attempt, base_delay, max_delay),
        retry_on,
    )


def with_retries(max_retries: int = 3, delay: float = 2) -> Callable[[F], F]:
    """
    Retry any exception with a linear delay (`delay * attempt_number`).

    Used for local I/O such as the token file. HTTP calls go through
    `with_backoff` instead.
    """
    return _retrying(max_retries, lambda attempt: delay * attempt, lambda exc: True)
