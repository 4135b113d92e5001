"""
Authenticated HTTP client for the job-board backend.

Two cooperating responsibilities:

- the request pipeline: attach the bearer token, dispatch, translate errors;
- the 401 path: hand the failure to the SessionManager's refresh coordinator
  and replay the original request once with the new token.

Network failures and 5xx responses on reads are retried by `with_backoff`;
401 never is, since it belongs to the refresh coordinator alone.
"""

from collections.abc import Callable
from typing import Any

import httpx

from hkjobs.core.errors.exceptions import NetworkException
from hkjobs.core.errors.handlers import exception_from_response
from hkjobs.core.schemas import TokenModel
from hkjobs.core.utils.retry import with_backoff
from hkjobs.user.auth.session import SessionManager
from loggers import get_logger

logger = get_logger(__name__)

AUTHORIZATION = "Authorization"


def bearer(token: str) -> str:
    return f"Bearer {token}"


class ApiClient:
    def __init__(
        self,
        session: SessionManager,
        *,
        base_url: str,
        timeout: float = 30.0,
        refresh_path: str = "/auth/refresh",
        retry_attempts: int = 3,
        retry_base_delay: float = 1.0,
        retry_max_delay: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.session = session
        self.refresh_path = refresh_path
        self.retry_attempts = retry_attempts
        self.retry_base_delay = retry_base_delay
        self.retry_max_delay = retry_max_delay
        self._http = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    @property
    def base_url(self) -> httpx.URL:
        return self._http.base_url

    def build_request(self, method: str, url: str, **kwargs: Any) -> httpx.Request:
        return self._http.build_request(method, url, **kwargs)

    # ----- Pipeline ----- #
    async def send(self, request: httpx.Request, *, auth: bool = True) -> httpx.Response:
        """
        Send a request the way `httpx.AsyncClient.send` does, with auth recovery.

        Raises:
            ApiException subclasses for error statuses, NetworkException when no
            response was received, AuthExpiredException when the session could
            not be refreshed
        """
        await request.aread()
        return await self._send(request, retried=False, auth=auth)

    async def _send(
        self,
        request: httpx.Request,
        *,
        retried: bool,
        auth: bool = True,
        on_replay: Callable[[], None] | None = None,
    ) -> httpx.Response:
        unmanaged = not auth or AUTHORIZATION in request.headers
        sent_token = None if unmanaged else self.session.access_token
        if sent_token:
            request.headers[AUTHORIZATION] = bearer(sent_token)

        logger.debug("[ApiClient] API Request: %s %s", request.method, request.url)
        response = await self._dispatch(request)

        if (
            response.status_code == 401
            and not retried
            and not unmanaged
            and self.session.refresh_token
        ):
            current = self.session.access_token
            if sent_token and current and current != sent_token:
                # Another request refreshed while this one was in flight.
                token = current
            else:
                token = await self.session.refresh(self.refresh_tokens)
            if on_replay is not None:
                on_replay()
            return await self._send(self._with_token(request, token), retried=True)

        if response.is_error:
            exc = exception_from_response(response)
            logger.warning(
                "[ApiClient] API Response Error: %s %s -> %s %s",
                request.method,
                request.url,
                response.status_code,
                exc.message,
            )
            raise exc

        return response

    async def _dispatch(self, request: httpx.Request) -> httpx.Response:
        info = {"method": request.method, "url": str(request.url)}
        try:
            return await self._http.send(request)
        except httpx.TimeoutException as exc:
            raise NetworkException(
                f"Request timed out: {request.method} {request.url}",
                code=NetworkException.TIMEOUT,
                additional_info=info,
            ) from exc
        except httpx.TransportError as exc:
            raise NetworkException(
                f"Network error: {exc}",
                code=NetworkException.NETWORK,
                additional_info=info,
            ) from exc

    @staticmethod
    def _with_token(request: httpx.Request, token: str) -> httpx.Request:
        headers = request.headers.copy()
        headers[AUTHORIZATION] = bearer(token)
        return httpx.Request(
            request.method,
            request.url,
            headers=headers,
            content=request.content,
            extensions=request.extensions,
        )

    async def refresh_tokens(self, refresh_token: str) -> TokenModel:
        """POST the refresh token outside the pipeline: no bearer, no 401 recursion."""
        request = self._http.build_request(
            "POST", self.refresh_path, json={"refreshToken": refresh_token}
        )
        response = await self._dispatch(request)
        if response.is_error:
            raise exception_from_response(response)
        return TokenModel.model_validate(response.json())

    # ----- Convenience ----- #
    async def request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        data: dict[str, Any] | None = None,
        files: Any = None,
        headers: dict[str, str] | None = None,
        retry: bool | None = None,
        auth: bool = True,
    ) -> httpx.Response:
        """
        Build and send a request.

        `retry` defaults to True for GET and False otherwise; retried calls use
        exponential backoff on network errors and 5xx responses only. With
        `auth=False` no bearer is attached and a 401 is returned to the caller
        as is (login, registration, password reset).
        """
        method = method.upper()
        # Backoff attempts share one 401 replay: a later attempt never refreshes again.
        replayed = False

        def mark_replayed() -> None:
            nonlocal replayed
            replayed = True

        async def attempt() -> httpx.Response:
            request = self._http.build_request(
                method,
                url,
                params=params,
                json=json,
                data=data,
                files=files,
                headers=headers,
            )
            await request.aread()
            return await self._send(
                request, retried=replayed, auth=auth, on_replay=mark_replayed
            )

        if retry if retry is not None else method == "GET":
            attempt = with_backoff(
                attempts=self.retry_attempts,
                base_delay=self.retry_base_delay,
                max_delay=self.retry_max_delay,
            )(attempt)
        return await attempt()

    async def request_json(self, method: str, url: str, **kwargs: Any) -> Any:
        response = await self.request(method, url, **kwargs)
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", url, **kwargs)

    async def put(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("PUT", url, **kwargs)

    async def patch(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("PATCH", url, **kwargs)

    async def delete(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("DELETE", url, **kwargs)
