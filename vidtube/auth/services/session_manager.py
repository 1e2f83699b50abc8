"""
Session management for user authentication.

Orchestrates login, logout, refresh and password change on top of the
credential store and the token service. Each user has one active refresh
token; every login or refresh replaces it.
"""

import hmac
import logging
from dataclasses import dataclass
from typing import Optional

from common.auth.jwt_auth import JWTAuth, TokenError
from common.utils.exceptions import (
    NotFoundException,
    UnauthorizedException,
    ValidationException,
)
from vidtube.auth.services.credential_store import CredentialStore, to_public

logger = logging.getLogger(__name__)


@dataclass
class SessionTokens:
    """Token pair handed to the client."""
    access_token: str
    refresh_token: str


@dataclass
class LoginResult:
    """Outcome of a successful login."""
    user: dict
    tokens: SessionTokens


class SessionManager:
    """
    Handles the session lifecycle.
    States are Anonymous and Authenticated; only the persisted refresh token
    is server-side state.
    """

    def __init__(self, credential_store: CredentialStore, jwt_auth: JWTAuth):
        """
        Initialize SessionManager.

        Args:
            credential_store: For user lookup and refresh-token persistence
            jwt_auth: For minting and verifying tokens
        """
        self._store = credential_store
        self._jwt = jwt_auth

    def _issue_tokens(self, user: dict) -> SessionTokens:
        user_id = str(user["_id"])
        access_token = self._jwt.issue_access_token({
            "id": user_id,
            "email": user.get("email"),
            "username": user.get("username"),
            "fullName": user.get("fullName"),
        })
        refresh_token = self._jwt.issue_refresh_token(user_id)
        return SessionTokens(access_token=access_token, refresh_token=refresh_token)

    async def login(
        self,
        password: Optional[str],
        username: Optional[str] = None,
        email: Optional[str] = None,
    ) -> LoginResult:
        """
        Authenticate with username or email plus password.

        Returns:
            LoginResult with the sanitized user and a fresh token pair

        Raises:
            ValidationException: No identifier or no password given
            NotFoundException: No user matches the identifier
            UnauthorizedException: Password is wrong
        """
        if not (username or "").strip() and not (email or "").strip():
            raise ValidationException(
                message="Username or email is required",
                code="MISSING_FIELDS",
                errors=["username", "email"],
            )

        if not password:
            raise ValidationException(
                message="Password is required",
                code="MISSING_FIELDS",
                errors=["password"],
            )

        user = await self._store.find_by_username_or_email(username=username, email=email)
        if not user:
            logger.warning("Login failed - unknown identifier")
            raise NotFoundException("User does not exist", code="USER_NOT_FOUND")

        if not self._store.verify_password(user, password):
            logger.warning(f"Login failed - invalid credentials for user {user['_id']}")
            raise UnauthorizedException("Invalid user credentials", code="LOGIN_FAILED")

        tokens = self._issue_tokens(user)
        # Overwrites any earlier token, which ends the previous session
        await self._store.set_refresh_token(user["_id"], tokens.refresh_token)

        logger.info(f"Login successful for user {user['_id']}")
        return LoginResult(user=to_public(user), tokens=tokens)

    async def logout(self, user_id: str) -> None:
        """
        End the user's session by removing the persisted refresh token.

        Idempotent: logging out without a stored token is not an error.
        """
        await self._store.set_refresh_token(user_id, None)
        logger.info(f"User {user_id} logged out")

    async def refresh(self, presented_token: Optional[str]) -> SessionTokens:
        """
        Exchange a refresh token for a new token pair.

        The presented token must pass signature/expiry AND match the
        persisted token; the new refresh token replaces it atomically.

        Raises:
            UnauthorizedException: Missing, expired, invalid, unknown-user,
                or already-rotated token
        """
        if not presented_token:
            raise UnauthorizedException("Unauthorized request", code="REFRESH_TOKEN_MISSING")

        try:
            payload = self._jwt.verify_refresh_token(presented_token)
        except TokenError as e:
            logger.warning(f"Refresh rejected: {e.reason}")
            raise UnauthorizedException(
                f"Invalid refresh token: {e.reason}",
                code="INVALID_REFRESH_TOKEN",
            )

        user = await self._store.find_by_id(payload["sub"])
        if not user:
            logger.warning(f"Refresh rejected: unknown user {payload['sub']}")
            raise UnauthorizedException("Invalid refresh token", code="INVALID_REFRESH_TOKEN")

        stored = user.get("refreshToken")
        if not stored or not hmac.compare_digest(stored, presented_token):
            logger.warning(f"Refresh rejected: stale token for user {user['_id']}")
            raise UnauthorizedException(
                "Refresh token is expired or used",
                code="REFRESH_TOKEN_REUSED",
            )

        tokens = self._issue_tokens(user)
        swapped = await self._store.rotate_refresh_token(
            user["_id"],
            expected=presented_token,
            new_token=tokens.refresh_token,
        )
        if not swapped:
            logger.warning(f"Refresh rejected: concurrent rotation for user {user['_id']}")
            raise UnauthorizedException(
                "Refresh token is expired or used",
                code="REFRESH_TOKEN_REUSED",
            )

        logger.info(f"Refresh token rotated for user {user['_id']}")
        return tokens

    async def change_password(
        self,
        user_id: str,
        old_password: Optional[str],
        new_password: Optional[str],
    ) -> None:
        """
        Change the caller's password after verifying the old one.

        Existing sessions are left as they are.

        Raises:
            ValidationException: Old or new password missing
            UnauthorizedException: Old password is wrong or user vanished
        """
        missing = [
            name for name, value in (("oldPassword", old_password), ("newPassword", new_password))
            if not (value or "").strip()
        ]
        if missing:
            raise ValidationException(
                message="Old and new passwords are required",
                code="MISSING_FIELDS",
                errors=missing,
            )

        user = await self._store.find_by_id(user_id)
        if not user or not self._store.verify_password(user, old_password):
            logger.warning(f"Password change rejected for user {user_id}")
            raise UnauthorizedException("Invalid old password", code="INVALID_PASSWORD")

        await self._store.update_password(user["_id"], new_password)
