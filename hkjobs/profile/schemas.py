from typing import Any

from pydantic import Field, field_validator, model_validator

from hkjobs.core.schemas import Base, RequestModel
from hkjobs.core.validations import HTTP_URL_VALIDATOR, PHONE_NUMBER_REGEX


class ProfileFields(Base):
    bio: str | None = None
    location: str | None = None
    phone: str | None = None
    skills: list[str] | None = None
    experience: str | None = None
    education: str | None = None
    preferred_job_categories: list[str] | None = None
    preferred_locations: list[str] | None = None
    expected_salary_min: int | None = None
    expected_salary_max: int | None = None
    linkedin_url: str | None = None
    github_url: str | None = None
    portfolio_url: str | None = None


class UpdateProfileRequest(ProfileFields, RequestModel):
    expected_salary_min: int | None = Field(None, ge=0)
    expected_salary_max: int | None = Field(None, ge=0)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, value: str | None) -> str | None:
        if value is not None and not PHONE_NUMBER_REGEX.match(value):
            raise ValueError(
                "Phone number must contain only digits (optionally starting with '+') and be 5-20 characters long."
            )
        return value

    @field_validator("linkedin_url", "github_url", "portfolio_url")
    @classmethod
    def validate_url(cls, value: str | None) -> str | None:
        if value is not None and not HTTP_URL_VALIDATOR.match(value):
            raise ValueError("Must be a valid http(s) URL")
        return value

    @model_validator(mode="after")
    def check_salary_range(self) -> "UpdateProfileRequest":
        low, high = self.expected_salary_min, self.expected_salary_max
        if low is not None and high is not None and low > high:
            raise ValueError("Expected minimum salary cannot exceed the maximum")
        return self


class ProfileSuggestion(ProfileFields):
    """Partial profile extracted by the backend (LinkedIn import, resume parsing)."""


class ProfileCompleteness(Base):
    percentage: float
    missing_fields: list[str] = []
    suggestions: list[str] = []


class UploadedFile(Base):
    url: str


class ProfileValidation(Base):
    valid: bool
    errors: dict[str, str] = {}
    warnings: dict[str, str] = {}


class VisibilitySettings(Base):
    public_profile: bool = False
    show_email: bool = False
    show_phone: bool = False
    show_resume: bool = False


class UpdateVisibilityRequest(RequestModel):
    public_profile: bool | None = None
    show_email: bool | None = None
    show_phone: bool | None = None
    show_resume: bool | None = None


class PublicProfile(Base):
    user: dict[str, Any] = {}
    profile: dict[str, Any] = {}
