from typing import Optional
from pathlib import PurePosixPath
from uuid import uuid4
import logging

from adapters.storage_client import StorageClient
from app.exceptions import BackendError, ServiceValidationError
from domain.schemas.profile_schemas import Profile, ProfileUpdate
from domain.schemas.results import ServiceResult
from repositories import ProfileRepository

logger = logging.getLogger("cooksmart.profile")


class ProfileService:
    """Business logic for profile management"""

    def __init__(
        self,
        profiles: ProfileRepository,
        storage: Optional[StorageClient] = None,
        avatar_bucket: str = "avatars",
    ):
        self.profiles = profiles
        self.storage = storage
        self.avatar_bucket = avatar_bucket

    async def get_profile(self, user_id: str) -> Optional[Profile]:
        """Profile row for ``user_id``; ``None`` if missing or unreachable."""
        try:
            row = await self.profiles.get_by_user_id(user_id)
        except BackendError as exc:
            logger.error(f"Error fetching profile user_id={user_id}: {exc}")
            return None
        if row is None:
            logger.warning(f"profile_not_found user_id={user_id}")
            return None
        return Profile.model_validate(row)

    async def update_profile(self, user_id: str, updates: ProfileUpdate) -> ServiceResult:
        """Write the changed fields, then read the profile back."""
        values = updates.model_dump(exclude_unset=True)
        if "display_name" in values and values["display_name"] is not None:
            values["display_name"] = values["display_name"].strip()
        if values:
            try:
                await self.profiles.update(user_id, values)
            except BackendError as exc:
                logger.error(f"Error updating profile user_id={user_id}: {exc}")
                return ServiceResult.from_error(exc, prefix="Failed to update profile")

        profile = await self.get_profile(user_id)
        if profile is None:
            return ServiceResult.fail("Profile not found", code="NOT_FOUND", http_status=404)
        logger.info(f"profile_updated user_id={user_id}")
        return ServiceResult.ok(profile)

    async def upload_avatar(
        self, user_id: str, filename: str, content: bytes, content_type: Optional[str] = None
    ) -> ServiceResult:
        if self.storage is None:
            return ServiceResult.fail("Avatar storage is not configured")
        if not content:
            raise ServiceValidationError("Avatar file is empty", code="EMPTY_FILE")

        suffix = PurePosixPath(filename or "").suffix.lower()
        path = f"{user_id}/{uuid4().hex}{suffix}"
        result = await self.storage.upload(
            self.avatar_bucket, path, content, content_type, upsert=True
        )
        if not result.ok:
            logger.error(f"Error uploading avatar user_id={user_id}: {result.error}")
            return ServiceResult.from_error(result.error, prefix="Failed to upload avatar")

        url = self.storage.get_public_url(self.avatar_bucket, path)
        return await self.update_profile(user_id, ProfileUpdate(avatar_url=url))

    async def probe(self, timeout: float) -> None:
        await self.profiles.probe(timeout)
