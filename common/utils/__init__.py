"""
Utilities module - Common helpers for API responses, exceptions, and passwords.
"""

from common.utils.responses import success_response, error_response
from common.utils.exceptions import (
    APIException,
    ValidationException,
    UnauthorizedException,
    NotFoundException,
    ConflictException,
    UploadException,
    InternalServerException,
)
from common.utils.handlers import register_exception_handlers
from common.utils.password import PasswordHasher

__all__ = [
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
]
