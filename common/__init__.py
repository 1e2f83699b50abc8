"""
Common library for reusable infrastructure components.

This package provides generic modules that can be used across projects:

- database: Async MongoDB connection with Motor
- auth: JWT access/refresh tokens and the FastAPI auth dependency
- media: Pluggable media storage (Cloudinary)
- utils: Standard responses, exceptions, handlers, password hashing
- config: Base settings class
"""

from common.database import MongoDB
from common.auth import JWTAuth, TokenExpiredError, TokenInvalidError, create_auth_dependency
from common.media import MediaStorage, MediaUploadResult, CloudinaryStorage
from common.utils import (
    success_response,
    error_response,
    APIException,
    ValidationException,
    UnauthorizedException,
    NotFoundException,
    ConflictException,
    UploadException,
    InternalServerException,
    register_exception_handlers,
    PasswordHasher,
)
from common.config import BaseAppSettings

__all__ = [
    # Database
    "MongoDB",
    # Auth
    "JWTAuth",
    "TokenExpiredError",
    "TokenInvalidError",
    "create_auth_dependency",
    # Media
    "MediaStorage",
    "MediaUploadResult",
    "CloudinaryStorage",
    # Utils
    "success_response",
    "error_response",
    "APIException",
    "ValidationException",
    "UnauthorizedException",
    "NotFoundException",
    "ConflictException",
    "UploadException",
    "InternalServerException",
    "register_exception_handlers",
    "PasswordHasher",
    # Config
    "BaseAppSettings",
]
