from typing import Any

import httpx

from hkjobs.core.errors.exceptions import (
    AccessForbiddenException,
    ApiException,
    InstanceAlreadyExistsException,
    InstanceNotFoundException,
    RateLimitedException,
    ServerErrorException,
    UnauthorizedException,
    ValidationException,
)

RATE_LIMITED_MESSAGE = "Too many requests. Please try again later."
RATE_LIMITED_WITH_HINT_MESSAGE = "Too many requests. Please try again in {} seconds."
SERVER_ERROR_MESSAGE = "Server error. Please try again later."

STATUS_EXCEPTIONS: dict[int, type[ApiException]] = {
    400: ValidationException,
    401: UnauthorizedException,
    403: AccessForbiddenException,
    404: InstanceNotFoundException,
    409: InstanceAlreadyExistsException,
    422: ValidationException,
}


def decode_payload(response: httpx.Response) -> Any:
    """
    Best-effort decoding of an error body.

    Args:
        response: The failed response

    Returns:
        The JSON document when the body is JSON, the raw text otherwise,
        or None for an empty body
    """
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def format_rate_limit_message(retry_after: str | None) -> str:
    # Retry-After may also be an HTTP date; only a delay in seconds fits the hint.
    if retry_after and retry_after.strip().isdigit():
        return RATE_LIMITED_WITH_HINT_MESSAGE.format(retry_after.strip())
    return RATE_LIMITED_MESSAGE


def exception_from_response(response: httpx.Response) -> ApiException:
    """
    Translate a non-2xx response into the matching ApiException subclass.

    429 carries the Retry-After hint, any 5xx collapses into a generic
    server error, other statuses keep their code and body for the caller.

    Args:
        response: The failed response

    Returns:
        The exception to raise
    """
    status_code = response.status_code
    payload = decode_payload(response)
    info = {"method": response.request.method, "url": str(response.request.url)}

    if status_code == 429:
        retry_after = response.headers.get("retry-after")
        return RateLimitedException(
            format_rate_limit_message(retry_after),
            retry_after=retry_after,
            payload=payload,
            additional_info=info,
        )

    if status_code >= 500:
        return ServerErrorException(
            SERVER_ERROR_MESSAGE,
            status_code=status_code,
            payload=payload,
            additional_info=info,
        )

    exc_class = STATUS_EXCEPTIONS.get(status_code, ApiException)
    message = None
    if isinstance(payload, dict):
        message = payload.get("message") or payload.get("error")
    return exc_class(
        message or response.reason_phrase or f"HTTP {status_code}",
        status_code=status_code,
        payload=payload,
        additional_info=info,
    )
