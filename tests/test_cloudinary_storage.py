"""Tests for CloudinaryStorage using an httpx mock transport."""

import hashlib

import httpx
import pytest
from unittest.mock import MagicMock, patch

from common.media import CloudinaryStorage
from common.utils.exceptions import UploadException


@pytest.fixture
def local_file(tmp_path):
    path = tmp_path / "avatar.png"
    path.write_bytes(b"\x89PNG avatar")
    return str(path)


def _storage(handler, **overrides):
    options = {
        "cloud_name": "demo",
        "api_key": "1234",
        "api_secret": "shh",
        "folder": "vidtube",
        "client": httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    }
    options.update(overrides)
    return CloudinaryStorage(**options)


class TestSignature:

    @pytest.mark.asyncio
    async def test_request_is_signed_with_sorted_params_and_secret(self, local_file):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = request.content
            return httpx.Response(200, json={
                "secure_url": "https://res.cloudinary.com/demo/image/upload/avatar.png",
                "public_id": "vidtube/avatar",
            })

        clock = MagicMock()
        clock.time.return_value = 1700000000
        with patch("common.media.cloudinary.time", clock):
            await _storage(handler).upload(local_file, resource_type="image")

        expected = hashlib.sha1(b"folder=vidtube&timestamp=1700000000shh").hexdigest()
        assert expected.encode() in seen["body"]
        assert b"1700000000" in seen["body"]


class TestUpload:

    @pytest.mark.asyncio
    async def test_upload_success(self, local_file):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = request.content
            return httpx.Response(200, json={
                "secure_url": "https://res.cloudinary.com/demo/image/upload/avatar.png",
                "public_id": "vidtube/avatar",
                "resource_type": "image",
            })

        result = await _storage(handler).upload(local_file, resource_type="image")

        assert seen["url"] == "https://api.cloudinary.com/v1_1/demo/image/upload"
        assert b'name="signature"' in seen["body"]
        assert b'name="api_key"' in seen["body"]
        assert result.url == "https://res.cloudinary.com/demo/image/upload/avatar.png"
        assert result.public_id == "vidtube/avatar"
        assert result.duration == 0.0

    @pytest.mark.asyncio
    async def test_video_duration_is_reported(self, local_file):
        def handler(request):
            return httpx.Response(200, json={
                "secure_url": "https://res.cloudinary.com/demo/video/upload/clip.mp4",
                "public_id": "vidtube/clip",
                "resource_type": "video",
                "duration": 42.7,
            })

        result = await _storage(handler).upload(local_file, resource_type="video")
        assert result.duration == 42.7
        assert result.resource_type == "video"

    @pytest.mark.asyncio
    async def test_rejected_upload(self, local_file):
        def handler(request):
            return httpx.Response(400, json={"error": {"message": "Invalid image file"}})

        with pytest.raises(UploadException) as exc_info:
            await _storage(handler).upload(local_file)
        assert "Invalid image file" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_transport_error(self, local_file):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(UploadException) as exc_info:
            await _storage(handler).upload(local_file)
        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_response_without_url(self, local_file):
        def handler(request):
            return httpx.Response(200, json={"public_id": "vidtube/avatar"})

        with pytest.raises(UploadException):
            await _storage(handler).upload(local_file)

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        def handler(request):
            raise AssertionError("no request expected")

        with pytest.raises(UploadException):
            await _storage(handler).upload(str(tmp_path / "missing.png"))

    @pytest.mark.asyncio
    async def test_unconfigured_storage(self, local_file):
        def handler(request):
            raise AssertionError("no request expected")

        with pytest.raises(UploadException) as exc_info:
            await _storage(handler, api_secret="").upload(local_file)
        assert exc_info.value.message == "Media storage is not configured"
