"""
Media storage module - Pluggable upload providers (Cloudinary).
"""

from common.media.base import MediaStorage, MediaUploadResult
from common.media.cloudinary import CloudinaryStorage

__all__ = ["MediaStorage", "MediaUploadResult", "CloudinaryStorage"]
