from __future__ import annotations

from typing import Any


def make_user_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": "user-1",
        "email": "jane.doe@example.com",
        "name": "Jane Doe",
        "role": "USER",
        "isEmailVerified": True,
        "createdAt": "2024-01-01T00:00:00Z",
        "updatedAt": "2024-01-02T00:00:00Z",
    }
    payload.update(overrides)
    return payload


def make_profile_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": "profile-1",
        "userId": "user-1",
        "bio": "Backend engineer",
        "location": "Hong Kong",
        "skills": ["python", "sql"],
        "preferredJobCategories": ["IT"],
        "preferredLocations": ["Central"],
        "expectedSalaryMin": 30000,
        "expectedSalaryMax": 45000,
    }
    payload.update(overrides)
    return payload
