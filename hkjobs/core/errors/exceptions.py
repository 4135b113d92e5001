from typing import Any


class CoreException(Exception):
    def __init__(
        self, message: str | None = None, additional_info: dict[str, Any] | None = None
    ):
        super().__init__(message)
        self.message = message
        self.additional_info = additional_info


class TokenStorageException(CoreException):
    pass


class NetworkException(CoreException):
    """Timeout or connection-level failure; no HTTP response was received."""

    TIMEOUT = "ECONNABORTED"
    NETWORK = "ERR_NETWORK"

    def __init__(
        self,
        message: str | None = None,
        *,
        code: str = NETWORK,
        additional_info: dict[str, Any] | None = None,
    ):
        super().__init__(message, additional_info)
        self.code = code


class AuthExpiredException(CoreException):
    """The refresh token was rejected; the session is over."""


class ApiException(CoreException):
    """Non-2xx response from the backend."""

    def __init__(
        self,
        message: str | None = None,
        *,
        status_code: int,
        payload: Any = None,
        additional_info: dict[str, Any] | None = None,
    ):
        super().__init__(message, additional_info)
        self.status_code = status_code
        self.payload = payload

    @property
    def server_message(self) -> str | None:
        if isinstance(self.payload, dict):
            message = self.payload.get("message") or self.payload.get("error")
            if isinstance(message, str) and message:
                return message
        return None

    @property
    def code(self) -> str | None:
        if isinstance(self.payload, dict):
            code = self.payload.get("code")
            if code is not None:
                return str(code)
        return None

    @property
    def details(self) -> Any:
        if isinstance(self.payload, dict):
            return self.payload.get("details") or self.payload.get("errors")
        return None


class UnauthorizedException(ApiException):
    pass


class AccessForbiddenException(ApiException):
    pass


class InstanceNotFoundException(ApiException):
    pass


class InstanceAlreadyExistsException(ApiException):
    pass


class ValidationException(ApiException):
    pass


class RateLimitedException(ApiException):
    def __init__(
        self,
        message: str | None = None,
        *,
        retry_after: str | None = None,
        payload: Any = None,
        additional_info: dict[str, Any] | None = None,
    ):
        super().__init__(
            message,
            status_code=429,
            payload=payload,
            additional_info=additional_info,
        )
        self.retry_after = retry_after


class ServerErrorException(ApiException):
    pass
