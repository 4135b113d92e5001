from typing import Any

from pydantic import EmailStr, Field, model_validator

from hkjobs.core.schemas import (
    EmailNormalizationMixin,
    PasswordPolicyMixin,
    RequestModel,
    TokenModel,
)
from hkjobs.core.validations import NAME_MIN_LENGTH
from hkjobs.user.schemas import User

PASSWORDS_DO_NOT_MATCH = "Passwords don't match"


class LoginRequest(EmailNormalizationMixin, RequestModel):
    email: EmailStr
    password: str = Field(min_length=1)


class RegisterRequest(PasswordPolicyMixin, EmailNormalizationMixin, RequestModel):
    email: EmailStr
    password: str
    confirm_password: str | None = None
    name: str = Field(min_length=NAME_MIN_LENGTH)

    @model_validator(mode="after")
    def check_passwords_match(self) -> "RegisterRequest":
        if self.confirm_password is not None and self.password != self.confirm_password:
            raise ValueError(PASSWORDS_DO_NOT_MATCH)
        return self

    def to_payload(self) -> dict[str, Any]:
        # The confirmation never leaves the client.
        payload = super().to_payload()
        payload.pop("confirmPassword", None)
        return payload


class PasswordResetRequest(EmailNormalizationMixin, RequestModel):
    email: EmailStr


class ResetPasswordRequest(PasswordPolicyMixin, RequestModel):
    token: str
    new_password: str


class ChangePasswordRequest(PasswordPolicyMixin, RequestModel):
    current_password: str
    new_password: str


class AuthResponse(TokenModel):
    user: User
