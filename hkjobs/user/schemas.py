from datetime import datetime

from pydantic import AliasChoices, EmailStr, Field

from hkjobs.core.schemas import Base
from hkjobs.user.enums import UserRole


class UserProfile(Base):
    id: str
    user_id: str
    bio: str | None = None
    location: str | None = None
    phone: str | None = None
    skills: list[str] = []
    experience: str | None = None
    education: str | None = None
    preferred_job_categories: list[str] = []
    preferred_locations: list[str] = []
    expected_salary_min: int | None = None
    expected_salary_max: int | None = None
    profile_picture_url: str | None = None
    resume_url: str | None = None
    linkedin_url: str | None = None
    github_url: str | None = None
    portfolio_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class User(Base):
    id: str
    email: EmailStr
    name: str | None = None
    role: UserRole | str = UserRole.USER
    is_email_verified: bool = Field(
        False, validation_alias=AliasChoices("isEmailVerified", "isVerified")
    )
    created_at: datetime | None = None
    updated_at: datetime | None = None
    last_login: datetime | None = None
    profile: UserProfile | None = None
