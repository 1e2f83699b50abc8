"""
Pydantic models for Auth system request validation.

Fields are optional at the schema level so the session protocol can report
missing values in the standard envelope with its own messages.
"""

from typing import Optional
from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Request body for user login. Either username or email is required."""
    username: Optional[str] = Field(None, description="Username (case-insensitive)")
    email: Optional[str] = Field(None, description="Email (case-insensitive)")
    password: Optional[str] = None


class RefreshTokenRequest(BaseModel):
    """Request body for non-cookie clients renewing their tokens."""
    refreshToken: Optional[str] = None


class ChangePasswordRequest(BaseModel):
    """Request body for changing the current user's password."""
    oldPassword: Optional[str] = None
    newPassword: Optional[str] = None
