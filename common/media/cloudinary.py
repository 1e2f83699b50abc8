"""
Cloudinary media storage provider.

Uses Cloudinary's signed upload REST API over httpx; requests are signed with
the official SDK's `api_sign_request`.

Example:
    storage = CloudinaryStorage(
        cloud_name="demo",
        api_key="1234",
        api_secret="secret",
        folder="vidtube",
    )
    result = await storage.upload("/tmp/avatar.png", resource_type="image")
    print(result.url)
"""

import logging
import os
import time
from typing import Dict, Any, Optional

import httpx
from cloudinary.utils import api_sign_request

from common.media.base import MediaStorage, MediaUploadResult
from common.utils.exceptions import UploadException

logger = logging.getLogger(__name__)


class CloudinaryStorage(MediaStorage):
    """
    Uploads files to Cloudinary.

    Each upload opens its own AsyncClient unless one is injected.
    """

    API_BASE_URL = "https://api.cloudinary.com/v1_1"

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        folder: Optional[str] = None,
        timeout: float = 120.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize Cloudinary storage.

        Args:
            cloud_name: Cloudinary cloud name
            api_key: Cloudinary API key
            api_secret: Cloudinary API secret (used only for signing)
            folder: Optional folder to upload into
            timeout: Request timeout in seconds
            client: Optional shared httpx client (mainly for tests)
        """
        self._cloud_name = cloud_name
        self._api_key = api_key
        self._api_secret = api_secret
        self._folder = folder
        self._timeout = timeout
        self._client = client

    async def upload(
        self,
        local_path: str,
        resource_type: str = "auto",
    ) -> MediaUploadResult:
        """Upload a local file to Cloudinary."""
        if not local_path or not os.path.isfile(local_path):
            raise UploadException("File to upload was not found")

        if not (self._cloud_name and self._api_key and self._api_secret):
            raise UploadException("Media storage is not configured")

        params: Dict[str, Any] = {"timestamp": int(time.time())}
        if self._folder:
            params["folder"] = self._folder

        data = {
            **params,
            "api_key": self._api_key,
            "signature": api_sign_request(params, self._api_secret),
        }
        url = f"{self.API_BASE_URL}/{self._cloud_name}/{resource_type}/upload"

        logger.debug(f"Uploading {os.path.basename(local_path)} to Cloudinary ({resource_type})")

        try:
            with open(local_path, "rb") as fh:
                files = {"file": (os.path.basename(local_path), fh)}
                if self._client is not None:
                    response = await self._client.post(url, data=data, files=files)
                else:
                    async with httpx.AsyncClient(timeout=self._timeout) as client:
                        response = await client.post(url, data=data, files=files)
        except httpx.HTTPError as e:
            logger.error(f"Cloudinary upload request failed: {e}")
            raise UploadException("Failed to reach media storage")

        if response.status_code != 200:
            try:
                error_message = response.json().get("error", {}).get("message", "Unknown error")
            except ValueError:
                error_message = response.text[:200]
            logger.error(f"Cloudinary upload rejected ({response.status_code}): {error_message}")
            raise UploadException(f"Media storage rejected the file: {error_message}")

        body = response.json()
        file_url = body.get("secure_url") or body.get("url")
        public_id = body.get("public_id")

        if not file_url or not public_id:
            logger.error("Cloudinary upload response had no URL")
            raise UploadException("Media storage returned no file URL")

        logger.info(f"Uploaded file to Cloudinary: {public_id}")
        return MediaUploadResult(
            url=file_url,
            public_id=public_id,
            resource_type=body.get("resource_type", resource_type),
            duration=float(body.get("duration") or 0.0),
        )
