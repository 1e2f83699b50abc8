"""Tests for the registration flow."""

import pytest

from common.media import MediaUploadResult
from common.utils.exceptions import (
    ConflictException,
    UploadException,
    ValidationException,
)


@pytest.fixture
def avatar_file(tmp_path):
    path = tmp_path / "avatar.png"
    path.write_bytes(b"\x89PNG avatar")
    return str(path)


@pytest.fixture
def cover_file(tmp_path):
    path = tmp_path / "cover.png"
    path.write_bytes(b"\x89PNG cover")
    return str(path)


class TestRegister:

    @pytest.mark.asyncio
    async def test_register_with_avatar(self, registration_service, mock_media_storage, neo, avatar_file):
        user = await registration_service.register(**neo, avatar_path=avatar_file)

        assert user["username"] == "neo"
        assert user["email"] == "neo@x.com"
        assert user["fullName"] == "Neo A"
        assert user["avatar"] == "https://cdn.test/image/avatar.png"
        assert user["coverImage"] == ""
        assert "password" not in user
        assert "refreshToken" not in user
        mock_media_storage.upload.assert_awaited_once_with(avatar_file, resource_type="image")

    @pytest.mark.asyncio
    async def test_register_with_cover_image(self, registration_service, neo, avatar_file, cover_file):
        user = await registration_service.register(
            **neo, avatar_path=avatar_file, cover_image_path=cover_file
        )
        assert user["coverImage"] == "https://cdn.test/image/cover.png"

    @pytest.mark.asyncio
    async def test_missing_fields_reported_together(self, registration_service, mock_media_storage, avatar_file):
        with pytest.raises(ValidationException) as exc_info:
            await registration_service.register(
                username="neo",
                email="",
                full_name="Neo A",
                password=None,
                avatar_path=avatar_file,
            )

        assert exc_info.value.status_code == 400
        assert exc_info.value.errors == ["email", "password"]
        mock_media_storage.upload.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_avatar_required(self, registration_service, users_collection, neo):
        with pytest.raises(ValidationException) as exc_info:
            await registration_service.register(**neo, avatar_path=None)

        assert exc_info.value.message == "Avatar file is required"
        assert exc_info.value.errors == ["avatar"]
        assert users_collection.docs == []

    @pytest.mark.asyncio
    async def test_conflict_checked_before_upload(
        self, registration_service, mock_media_storage, make_user, neo, avatar_file
    ):
        await make_user(username="bob", email="bob@x.com")
        neo["username"] = "Bob"

        with pytest.raises(ConflictException) as exc_info:
            await registration_service.register(**neo, avatar_path=avatar_file)

        assert exc_info.value.status_code == 409
        mock_media_storage.upload.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_avatar_upload_failure_creates_no_record(
        self, registration_service, mock_media_storage, users_collection, neo, avatar_file
    ):
        mock_media_storage.upload.side_effect = UploadException("Media storage rejected the file")

        with pytest.raises(UploadException):
            await registration_service.register(**neo, avatar_path=avatar_file)

        assert users_collection.docs == []

    @pytest.mark.asyncio
    async def test_unexpected_avatar_error_wrapped(
        self, registration_service, mock_media_storage, users_collection, neo, avatar_file
    ):
        mock_media_storage.upload.side_effect = RuntimeError("socket closed")

        with pytest.raises(UploadException) as exc_info:
            await registration_service.register(**neo, avatar_path=avatar_file)

        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "Avatar upload failed"
        assert users_collection.docs == []

    @pytest.mark.asyncio
    async def test_cover_image_failure_tolerated(
        self, registration_service, mock_media_storage, neo, avatar_file, cover_file
    ):
        mock_media_storage.upload.side_effect = [
            MediaUploadResult(url="https://cdn.test/image/avatar.png", public_id="vidtube/avatar"),
            UploadException("Media storage rejected the file"),
        ]

        user = await registration_service.register(
            **neo, avatar_path=avatar_file, cover_image_path=cover_file
        )

        assert user["avatar"] == "https://cdn.test/image/avatar.png"
        assert user["coverImage"] == ""
