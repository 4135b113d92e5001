from typing import Any

from hkjobs.core.cache.tags import CacheTags
from hkjobs.core.services import BaseService, FileUpload
from hkjobs.profile.enums import ProfileExportFormat
from hkjobs.profile.schemas import (
    ProfileCompleteness,
    ProfileSuggestion,
    ProfileValidation,
    PublicProfile,
    UpdateProfileRequest,
    UpdateVisibilityRequest,
    UploadedFile,
    VisibilitySettings,
)
from hkjobs.user.schemas import UserProfile
from loggers import get_logger

logger = get_logger(__name__)


class ProfileService(BaseService):
    # The current user embeds the profile; recommendations depend on it.
    tags = (CacheTags.PROFILE, CacheTags.USER)

    async def get_profile(self) -> UserProfile:
        return UserProfile.model_validate(await self._get("/profile"))

    async def update_profile(
        self, data: UpdateProfileRequest | dict[str, Any]
    ) -> UserProfile:
        body = UpdateProfileRequest.model_validate(data)
        payload = await self._patch("/profile", json=body.to_payload())
        return UserProfile.model_validate(payload)

    async def upload_profile_picture(self, file: FileUpload) -> UploadedFile:
        payload = await self._post("/profile/picture", files={"file": file})
        return UploadedFile.model_validate(payload)

    async def delete_profile_picture(self) -> None:
        await self._delete("/profile/picture")

    async def upload_resume(self, file: FileUpload) -> UploadedFile:
        payload = await self._post("/profile/resume", files={"file": file})
        return UploadedFile.model_validate(payload)

    async def delete_resume(self) -> None:
        await self._delete("/profile/resume")

    async def get_completeness(self) -> ProfileCompleteness:
        return ProfileCompleteness.model_validate(await self._get("/profile/completeness"))

    async def import_from_linkedin(self, linkedin_url: str) -> ProfileSuggestion:
        """Ask the backend to extract profile fields; nothing is saved until `update_profile`."""
        payload = await self._post(
            "/profile/import/linkedin", json={"url": linkedin_url}, invalidate=()
        )
        return ProfileSuggestion.model_validate(payload)

    async def parse_resume(self, file: FileUpload) -> ProfileSuggestion:
        payload = await self._post(
            "/profile/parse-resume", files={"file": file}, invalidate=()
        )
        return ProfileSuggestion.model_validate(payload)

    async def get_skill_suggestions(self, category: str) -> list[str]:
        data = await self._get("/profile/skills/suggestions", params={"category": category})
        return self.validate(list[str], data)

    async def validate_profile(
        self, data: UpdateProfileRequest | dict[str, Any]
    ) -> ProfileValidation:
        body = UpdateProfileRequest.model_validate(data)
        payload = await self._post(
            "/profile/validate", json=body.to_payload(), invalidate=()
        )
        return ProfileValidation.model_validate(payload)

    async def get_visibility_settings(self) -> VisibilitySettings:
        return VisibilitySettings.model_validate(await self._get("/profile/visibility"))

    async def update_visibility_settings(
        self, settings: UpdateVisibilityRequest | dict[str, Any]
    ) -> None:
        body = UpdateVisibilityRequest.model_validate(settings)
        await self._patch("/profile/visibility", json=body.to_payload())

    async def export_profile_data(
        self, format: ProfileExportFormat | str = ProfileExportFormat.JSON
    ) -> bytes:
        return await self._get_bytes(
            "/profile/export", params={"format": ProfileExportFormat(format)}
        )

    async def delete_profile(self) -> None:
        await self._delete("/profile")
        logger.info("[ProfileService] Profile deleted")

    async def get_public_profile(self, identifier: str) -> PublicProfile:
        data = await self._get(f"/profile/public/{identifier}", cached=False)
        return PublicProfile.model_validate(data)
