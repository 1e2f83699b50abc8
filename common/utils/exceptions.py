"""
Custom HTTP exceptions for the API error envelope.

Extends FastAPI's HTTPException so every failure carries the fields of the
standard error envelope (statusCode, message, errors). The registered
exception handlers turn them into responses.

Example:
    from common.utils import NotFoundException, ValidationException

    @app.get("/users/{id}")
    async def get_user(id: str):
        user = await users.find_one({"_id": ObjectId(id)})
        if not user:
            raise NotFoundException("User does not exist")
        return success_response(user)
"""

from typing import Optional, Any, Dict, List
from fastapi import HTTPException


class APIException(HTTPException):
    """
    Base API exception.

    Provides consistent error response format across the API.
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        code: Optional[str] = None,
        errors: Optional[List[Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        """
        Create an API exception.

        Args:
            status_code: HTTP status code
            message: Human-readable error message
            code: Machine-readable error code (logged, not sent)
            errors: List of specific errors (e.g. missing fields)
            headers: Optional response headers
        """
        self.message = message
        self.code = code
        self.errors = list(errors or [])

        super().__init__(
            status_code=status_code,
            detail=message,
            headers=headers,
        )


class ValidationException(APIException):
    """400 Bad Request - Missing or malformed input."""

    def __init__(
        self,
        message: str = "Validation error",
        code: str = "VALIDATION_ERROR",
        errors: Optional[List[Any]] = None,
    ):
        super().__init__(400, message, code, errors)


class UnauthorizedException(APIException):
    """401 Unauthorized - Missing or invalid credentials or tokens."""

    def __init__(
        self,
        message: str = "Unauthorized request",
        code: str = "UNAUTHORIZED",
        errors: Optional[List[Any]] = None,
    ):
        super().__init__(401, message, code, errors)


class NotFoundException(APIException):
    """404 Not Found - Resource doesn't exist."""

    def __init__(
        self,
        message: str = "Not found",
        code: str = "NOT_FOUND",
        errors: Optional[List[Any]] = None,
    ):
        super().__init__(404, message, code, errors)


class ConflictException(APIException):
    """409 Conflict - Resource already exists."""

    def __init__(
        self,
        message: str = "Conflict",
        code: str = "CONFLICT",
        errors: Optional[List[Any]] = None,
    ):
        super().__init__(409, message, code, errors)


class UploadException(APIException):
    """500 - The media storage service failed or returned nothing usable."""

    def __init__(
        self,
        message: str = "File upload failed",
        code: str = "UPLOAD_FAILED",
        errors: Optional[List[Any]] = None,
    ):
        super().__init__(500, message, code, errors)


class InternalServerException(APIException):
    """500 Internal Server Error - Unexpected server error."""

    def __init__(
        self,
        message: str = "Internal server error",
        code: str = "INTERNAL_ERROR",
        errors: Optional[List[Any]] = None,
    ):
        super().__init__(500, message, code, errors)
