"""
Human-readable error messages for the calling layer.

Turns any exception raised by the client into a short message suitable for a
UI or CLI, plus a structured summary for logging.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from hkjobs.core.errors.exceptions import (
    ApiException,
    AuthExpiredException,
    CoreException,
    NetworkException,
    RateLimitedException,
)
from loggers import get_logger

logger = get_logger(__name__)

DEFAULT_MESSAGE = "An unexpected error occurred."

NETWORK_MESSAGES = {
    NetworkException.TIMEOUT: "Request timeout. Please check your internet connection and try again.",
    NetworkException.NETWORK: "Network error. Please check your internet connection.",
}

STATUS_MESSAGES = {
    400: "Invalid request. Please check your input and try again.",
    401: "Authentication required. Please log in.",
    403: "You do not have permission to perform this action.",
    404: "The requested resource was not found.",
    409: "A conflict occurred. The resource may already exist.",
    422: "Invalid data provided. Please check your input.",
    429: "Too many requests. Please try again later.",
    500: "Server error. Please try again later.",
    502: "Bad gateway. The server is temporarily unavailable.",
    503: "Service unavailable. Please try again later.",
}

SESSION_EXPIRED_MESSAGE = "Your session has expired. Please log in again."


@dataclass(frozen=True)
class ErrorDetails:
    message: str
    code: str | None = None
    status_code: int | None = None
    details: Any = None


def get_error_message(error: BaseException | str | None) -> str:
    """
    Extract a user-facing message from an error.

    The rate-limit hint wins, then server-provided messages, then a fixed
    message for the HTTP status or network failure kind.
    """
    if error is None:
        return DEFAULT_MESSAGE
    if isinstance(error, str):
        return error

    if isinstance(error, RateLimitedException) and error.message:
        return error.message

    if isinstance(error, ApiException):
        if error.server_message:
            return error.server_message
        return STATUS_MESSAGES.get(error.status_code) or error.message or DEFAULT_MESSAGE

    if isinstance(error, NetworkException):
        return NETWORK_MESSAGES.get(error.code) or error.message or DEFAULT_MESSAGE

    if isinstance(error, AuthExpiredException):
        return SESSION_EXPIRED_MESSAGE

    if isinstance(error, CoreException) and error.message:
        return error.message

    return str(error) or DEFAULT_MESSAGE


def get_error_details(error: BaseException) -> ErrorDetails:
    message = get_error_message(error)

    if isinstance(error, ApiException):
        return ErrorDetails(
            message=message,
            code=error.code,
            status_code=error.status_code,
            details=error.details,
        )
    if isinstance(error, NetworkException):
        return ErrorDetails(message=message, code=error.code)

    return ErrorDetails(message=message)


def format_validation_errors(errors: Mapping[str, str | Sequence[str]]) -> list[str]:
    """Flatten a field → message(s) mapping into 'field: message' lines."""
    messages: list[str] = []
    for field, error in errors.items():
        if isinstance(error, str):
            messages.append(f"{field}: {error}")
        else:
            messages.extend(f"{field}: {item}" for item in error)
    return messages


def log_error(error: BaseException, context: str | None = None) -> ErrorDetails:
    details = get_error_details(error)
    prefix = f"[Error - {context}]" if context else "[Error]"
    logger.error(
        "%s %s | code=%s status=%s details=%r",
        prefix,
        details.message,
        details.code,
        details.status_code,
        details.details,
    )
    return details
