from typing import Any

from hkjobs.core.cache.manager import ResponseCache
from hkjobs.core.cache.tags import CacheTags
from hkjobs.core.errors.exceptions import AuthExpiredException, CoreException
from hkjobs.core.http.client import ApiClient
from hkjobs.core.schemas import SuccessResponse
from hkjobs.core.services import BaseService
from hkjobs.core.utils.security import mask_email
from hkjobs.user.auth.schemas import (
    AuthResponse,
    ChangePasswordRequest,
    LoginRequest,
    PasswordResetRequest,
    RegisterRequest,
    ResetPasswordRequest,
)
from hkjobs.user.auth.session import SessionManager
from hkjobs.user.schemas import User
from loggers import get_logger

logger = get_logger(__name__)


def _as_success(payload: Any) -> SuccessResponse:
    return SuccessResponse.model_validate(payload or {})


class AuthService(BaseService):
    """Authentication endpoints. Tokens always go through the SessionManager."""

    tags = (CacheTags.USER,)

    def __init__(
        self,
        client: ApiClient,
        session: SessionManager,
        cache: ResponseCache | None = None,
    ) -> None:
        super().__init__(client, cache)
        self.session = session

    async def _start_session(self, auth: AuthResponse) -> None:
        await self.session.set_tokens(auth)
        if self.cache is not None:
            await self.cache.clear()

    async def login(self, credentials: LoginRequest | dict[str, Any]) -> AuthResponse:
        data = LoginRequest.model_validate(credentials)
        payload = await self.client.request_json(
            "POST", "/auth/login", json=data.to_payload(), auth=False
        )
        auth = AuthResponse.model_validate(payload)
        await self._start_session(auth)
        logger.info("[AuthService] %s logged in", mask_email(auth.user.email))
        return auth

    async def register(self, user_data: RegisterRequest | dict[str, Any]) -> AuthResponse:
        """
        Create an account and start a session for it.

        The password policy and the confirmation are checked locally; the
        confirmation is stripped from the payload.

        Raises:
            pydantic.ValidationError: If the password breaks the policy or the
                confirmation does not match
        """
        data = RegisterRequest.model_validate(user_data)
        payload = await self.client.request_json(
            "POST", "/auth/register", json=data.to_payload(), auth=False
        )
        auth = AuthResponse.model_validate(payload)
        await self._start_session(auth)
        logger.info("[AuthService] %s registered", mask_email(auth.user.email))
        return auth

    async def logout(self) -> None:
        """
        Tell the backend, then end the local session whatever it answered.

        Backend errors still propagate once the local session is gone, except
        AuthExpiredException: the failed refresh has already ended the session.
        """
        try:
            await self.client.request_json("POST", "/auth/logout")
        except AuthExpiredException:
            logger.info("[AuthService] Session already expired on logout")
            return
        except CoreException:
            await self.session.logout(reason="logout")
            raise
        await self.session.logout(reason="logout")

    async def get_current_user(self) -> User:
        return User.model_validate(await self._get("/auth/me"))

    async def request_password_reset(self, email: str) -> SuccessResponse:
        data = PasswordResetRequest(email=email)
        payload = await self.client.request_json(
            "POST", "/auth/password-reset", json=data.to_payload(), auth=False
        )
        logger.info("[AuthService] Password reset requested for %s", mask_email(data.email))
        return _as_success(payload)

    async def reset_password(self, token: str, new_password: str) -> SuccessResponse:
        data = ResetPasswordRequest(token=token, new_password=new_password)
        payload = await self.client.request_json(
            "POST", "/auth/password-reset/confirm", json=data.to_payload(), auth=False
        )
        return _as_success(payload)

    async def change_password(
        self, current_password: str, new_password: str
    ) -> SuccessResponse:
        data = ChangePasswordRequest(
            current_password=current_password, new_password=new_password
        )
        return _as_success(await self._post("/auth/change-password", json=data.to_payload()))

    async def verify_email(self, token: str) -> SuccessResponse:
        return _as_success(await self._post("/auth/verify-email", json={"token": token}))

    async def resend_verification_email(self) -> SuccessResponse:
        return _as_success(await self._post("/auth/resend-verification", invalidate=()))

    async def refresh_token(self) -> str:
        """Refresh explicitly through the shared coordinator; returns the new access token."""
        return await self.session.refresh(self.client.refresh_tokens)

    def is_authenticated(self) -> bool:
        return self.session.is_authenticated
