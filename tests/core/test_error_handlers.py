import httpx
import pytest

from hkjobs.core.errors import handlers
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


def _response(
    status_code: int,
    *,
    json: object = None,
    text: str | None = None,
    headers: dict[str, str] | None = None,
) -> httpx.Response:
    request = httpx.Request("GET", "http://testserver/api/jobs")
    if json is not None:
        return httpx.Response(status_code, json=json, headers=headers, request=request)
    return httpx.Response(
        status_code, content=(text or "").encode(), headers=headers, request=request
    )


@pytest.mark.parametrize(
    ("status_code", "exc_class"),
    [
        (400, ValidationException),
        (401, UnauthorizedException),
        (403, AccessForbiddenException),
        (404, InstanceNotFoundException),
        (409, InstanceAlreadyExistsException),
        (422, ValidationException),
        (418, ApiException),
    ],
)
def test_exception_from_response_maps_status(
    status_code: int, exc_class: type[ApiException]
) -> None:
    exc = handlers.exception_from_response(
        _response(status_code, json={"message": "Backend says no"})
    )

    assert type(exc) is exc_class
    assert exc.status_code == status_code
    assert exc.message == "Backend says no"
    assert exc.additional_info == {"method": "GET", "url": "http://testserver/api/jobs"}


def test_exception_keeps_code_and_details() -> None:
    payload = {
        "error": "Validation failed",
        "code": "VALIDATION_ERROR",
        "details": {"email": "taken"},
    }

    exc = handlers.exception_from_response(_response(400, json=payload))

    assert exc.message == "Validation failed"
    assert exc.code == "VALIDATION_ERROR"
    assert exc.details == {"email": "taken"}
    assert exc.payload == payload


def test_exception_falls_back_to_reason_phrase_for_text_body() -> None:
    exc = handlers.exception_from_response(_response(404, text="not json"))

    assert isinstance(exc, InstanceNotFoundException)
    assert exc.message == "Not Found"
    assert exc.payload == "not json"
    assert exc.server_message is None


def test_rate_limited_with_retry_after() -> None:
    exc = handlers.exception_from_response(
        _response(429, json={"message": "slow"}, headers={"Retry-After": "30"})
    )

    assert isinstance(exc, RateLimitedException)
    assert exc.status_code == 429
    assert exc.retry_after == "30"
    assert exc.message == "Too many requests. Please try again in 30 seconds."


def test_rate_limited_without_retry_after() -> None:
    exc = handlers.exception_from_response(_response(429))

    assert isinstance(exc, RateLimitedException)
    assert exc.retry_after is None
    assert exc.message == handlers.RATE_LIMITED_MESSAGE


def test_rate_limited_with_http_date_uses_generic_message() -> None:
    exc = handlers.exception_from_response(
        _response(429, headers={"Retry-After": "Wed, 21 Oct 2026 07:28:00 GMT"})
    )

    assert exc.retry_after == "Wed, 21 Oct 2026 07:28:00 GMT"
    assert exc.message == handlers.RATE_LIMITED_MESSAGE


@pytest.mark.parametrize("status_code", [500, 502, 503, 504])
def test_server_errors_collapse_to_generic_message(status_code: int) -> None:
    exc = handlers.exception_from_response(
        _response(status_code, json={"message": "stack trace here"})
    )

    assert isinstance(exc, ServerErrorException)
    assert exc.status_code == status_code
    assert exc.message == handlers.SERVER_ERROR_MESSAGE


def test_decode_payload_empty_body() -> None:
    assert handlers.decode_payload(_response(204)) is None
