from __future__ import annotations

from enum import Enum

from pydantic import ValidationError
import pytest

from hkjobs.core.schemas import RequestModel, clean_params
from hkjobs.core.validations import password_policy_errors
from hkjobs.user.auth.schemas import ChangePasswordRequest, RegisterRequest


class Color(str, Enum):
    RED = "red"


class NoteRequest(RequestModel):
    job_listing_id: str
    cover_letter: str | None = None


def test_clean_params_drops_unset_values() -> None:
    cleaned = clean_params(
        {
            "page": 2,
            "search": "",
            "category": None,
            "remote": True,
            "archived": False,
            "color": Color.RED,
        }
    )

    assert cleaned == {"page": 2, "remote": "true", "archived": "false", "color": "red"}


def test_request_model_payload_is_camel_case_without_nones() -> None:
    payload = NoteRequest(job_listing_id="job-1").to_payload()

    assert payload == {"jobListingId": "job-1"}


def test_request_model_rejects_unknown_fields() -> None:
    with pytest.raises(ValidationError):
        NoteRequest.model_validate({"jobListingId": "job-1", "unexpected": 1})


def test_password_policy_lists_every_broken_rule() -> None:
    assert password_policy_errors("abc") == [
        "Password must be at least 8 characters",
        "Password must contain at least one uppercase letter",
        "Password must contain at least one number",
        "Password must contain at least one special character",
    ]
    assert password_policy_errors("Str0ng!pass") == []


def test_register_request_enforces_policy_and_confirmation() -> None:
    with pytest.raises(ValidationError, match="uppercase"):
        RegisterRequest(email="a@example.com", password="weakpass1!", name="Jane")

    with pytest.raises(ValidationError, match="Passwords don't match"):
        RegisterRequest(
            email="a@example.com",
            password="Str0ng!pass",
            confirm_password="Str0ng!pas",
            name="Jane",
        )


def test_register_request_normalizes_email_and_strips_confirmation() -> None:
    request = RegisterRequest(
        email="  Jane@Example.COM ",
        password="Str0ng!pass",
        confirm_password="Str0ng!pass",
        name="Jane",
    )

    assert request.to_payload() == {
        "email": "jane@example.com",
        "password": "Str0ng!pass",
        "name": "Jane",
    }


def test_change_password_checks_only_the_new_password() -> None:
    request = ChangePasswordRequest(current_password="old", new_password="N3w!password")

    assert request.to_payload() == {"currentPassword": "old", "newPassword": "N3w!password"}

    with pytest.raises(ValidationError):
        ChangePasswordRequest(current_password="old", new_password="short")
