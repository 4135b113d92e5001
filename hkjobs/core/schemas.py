from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator
from pydantic.alias_generators import to_camel

from hkjobs.core.utils.security import normalize_email
from hkjobs.core.validations import password_policy_errors


class Base(BaseModel):
    """Backend document. Wire names are camelCase; unknown fields are ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        use_enum_values=True,
        extra="ignore",
    )


class RequestModel(Base):
    """Request body sent to the backend."""

    model_config = ConfigDict(extra="forbid")

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class SuccessResponse(Base):
    success: bool = True
    message: str | None = None


class UpdatedCount(Base):
    updated: int


class DeletedCount(Base):
    deleted: int


class TokenModel(Base):
    access_token: str
    refresh_token: str


class EmailNormalizationMixin(BaseModel):
    @field_validator("email", mode="before", check_fields=False)
    @classmethod
    def _normalize_email(cls, v: str | EmailStr) -> str:
        return normalize_email(str(v))


class PasswordPolicyMixin(BaseModel):
    @field_validator("password", "new_password", check_fields=False)
    @classmethod
    def validate_password(cls, value: str) -> str:
        errors = password_policy_errors(value)
        if errors:
            raise ValueError(". ".join(errors))
        return value


def clean_params(params: dict[str, Any]) -> dict[str, Any]:
    """Drop unset query values and render the rest the way the backend expects."""
    cleaned: dict[str, Any] = {}
    for key, value in params.items():
        if value is None or value == "":
            continue
        if isinstance(value, bool):
            cleaned[key] = "true" if value else "false"
        elif hasattr(value, "value"):
            cleaned[key] = value.value
        else:
            cleaned[key] = value
    return cleaned
