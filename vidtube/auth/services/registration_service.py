"""
Registration flow.

Validates the sign-up form, uploads the avatar (and optional cover image)
to media storage, then creates the credential record.
"""

import logging
from typing import Optional

from common.media.base import MediaStorage
from common.utils.exceptions import (
    ConflictException,
    UploadException,
    ValidationException,
)
from vidtube.auth.services.credential_store import CredentialStore

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("username", "fullName", "email", "password")


class RegistrationService:
    """
    Creates new accounts.
    A record is only written once the avatar URL is known.
    """

    def __init__(self, credential_store: CredentialStore, media_storage: MediaStorage):
        """
        Initialize RegistrationService.

        Args:
            credential_store: For uniqueness checks and record creation
            media_storage: For avatar and cover image uploads
        """
        self._store = credential_store
        self._media = media_storage

    async def register(
        self,
        username: Optional[str],
        email: Optional[str],
        full_name: Optional[str],
        password: Optional[str],
        avatar_path: Optional[str],
        cover_image_path: Optional[str] = None,
    ) -> dict:
        """
        Register a new user.

        Args:
            username: Desired username
            email: Email address
            full_name: Display name
            password: Plaintext password
            avatar_path: Local path of the staged avatar file
            cover_image_path: Local path of the staged cover image, if any

        Returns:
            Sanitized projection of the created user

        Raises:
            ValidationException: Missing fields (all listed) or missing avatar
            ConflictException: Username or email already taken
            UploadException: Avatar upload failed
        """
        values = {
            "username": username,
            "fullName": full_name,
            "email": email,
            "password": password,
        }
        missing = [name for name in REQUIRED_FIELDS if not (values[name] or "").strip()]
        if missing:
            raise ValidationException(
                message="All fields are required",
                code="MISSING_FIELDS",
                errors=missing,
            )

        if await self._store.exists(username, email):
            raise ConflictException(
                message="User with email or username already exists",
                code="USER_ALREADY_EXISTS",
            )

        if not avatar_path:
            raise ValidationException(
                message="Avatar file is required",
                code="AVATAR_REQUIRED",
                errors=["avatar"],
            )

        try:
            avatar = await self._media.upload(avatar_path, resource_type="image")
        except UploadException:
            logger.error("Registration aborted - avatar upload failed")
            raise
        except Exception as e:
            logger.error(f"Registration aborted - avatar upload failed: {e}")
            raise UploadException("Avatar upload failed")

        cover_image_url = ""
        if cover_image_path:
            try:
                cover_image = await self._media.upload(cover_image_path, resource_type="image")
                cover_image_url = cover_image.url
            except Exception as e:
                logger.warning(f"Cover image upload failed, registering without it: {e}")

        return await self._store.create(
            username=username,
            email=email,
            full_name=full_name,
            password=password,
            avatar_url=avatar.url,
            cover_image_url=cover_image_url,
        )
