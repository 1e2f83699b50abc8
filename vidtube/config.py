"""
VidTube application settings.

Extends the base settings with VidTube-specific configuration.
"""

from typing import Optional
from common.config import BaseAppSettings


class Settings(BaseAppSettings):
    """VidTube-specific settings."""

    # ==========================================================================
    # Media Storage (Cloudinary)
    # ==========================================================================
    CLOUDINARY_CLOUD_NAME: Optional[str] = None
    CLOUDINARY_API_KEY: Optional[str] = None
    CLOUDINARY_API_SECRET: Optional[str] = None
    CLOUDINARY_FOLDER: Optional[str] = "vidtube"

    # Local staging directory for multipart uploads
    UPLOAD_TMP_DIR: str = "./public/temp"

    # ==========================================================================
    # API
    # ==========================================================================
    API_PREFIX: str = "/api/v1"
    VIDEO_PAGE_MAX_LIMIT: int = 100


# Global settings instance
settings = Settings()
