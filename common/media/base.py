"""
Abstract media storage interface.

Defines the contract that upload providers must implement, so that the
application only ever sees "upload a local file, get back a URL".

Example:
    from common.media import MediaStorage, CloudinaryStorage

    def get_media_storage(settings) -> MediaStorage:
        return CloudinaryStorage(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_API_SECRET,
        )
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class MediaUploadResult:
    """Where an uploaded file now lives."""
    url: str
    public_id: str
    resource_type: str = "image"
    duration: float = 0.0


class MediaStorage(ABC):
    """
    Abstract media storage provider.

    Implementations must either return a usable result or raise
    UploadException; they never return a partial result.
    """

    @abstractmethod
    async def upload(
        self,
        local_path: str,
        resource_type: str = "auto",
    ) -> MediaUploadResult:
        """
        Upload a local file.

        Args:
            local_path: Path of the file on local disk
            resource_type: "image", "video", "raw" or "auto"

        Returns:
            MediaUploadResult with the public URL and provider ID

        Raises:
            UploadException: If the file is missing or the upload fails
        """
        pass
