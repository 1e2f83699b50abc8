"""
Authentication module - JWT token service and FastAPI auth dependency.
"""

from common.auth.jwt_auth import JWTAuth, TokenError, TokenExpiredError, TokenInvalidError
from common.auth.dependencies import create_auth_dependency, extract_token

__all__ = [
    "JWTAuth",
    "TokenError",
    "TokenExpiredError",
    "TokenInvalidError",
    "create_auth_dependency",
    "extract_token",
]
