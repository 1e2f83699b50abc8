"""
JWT access/refresh token service.

Access and refresh tokens are signed with distinct secrets so that leaking one
does not compromise the other. Access tokens are short-lived and stateless;
refresh tokens live longer and are checked against the value persisted by the
caller.

Example:
    auth = JWTAuth(
        access_secret="access-secret",
        refresh_secret="refresh-secret",
        access_token_expire_minutes=15,
        refresh_token_expire_days=10,
    )

    access = auth.issue_access_token(
        {"id": user_id, "email": "neo@x.com", "username": "neo", "fullName": "Neo A"}
    )
    claims = auth.verify_access_token(access)
    print(claims["sub"])  # user_id
"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Dict, Any

from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTError


class TokenError(Exception):
    """Base class for token verification failures."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class TokenExpiredError(TokenError):
    """Signature is valid but the token is past its expiry."""


class TokenInvalidError(TokenError):
    """Bad signature, malformed token, or missing subject."""


class JWTAuth:
    """
    Issues and verifies signed tokens.

    Pure and stateless: nothing here touches storage.
    """

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        algorithm: str = "HS256",
        access_token_expire_minutes: int = 15,
        refresh_token_expire_days: int = 10,
    ):
        """
        Initialize the token service.

        Args:
            access_secret: Secret for signing access tokens
            refresh_secret: Secret for signing refresh tokens (must differ)
            algorithm: JWT algorithm (default: HS256)
            access_token_expire_minutes: Access token lifetime
            refresh_token_expire_days: Refresh token lifetime
        """
        if not access_secret or not refresh_secret:
            raise ValueError("Both access and refresh token secrets are required")

        self.access_secret = access_secret
        self.refresh_secret = refresh_secret
        self.algorithm = algorithm
        self.access_token_expire = timedelta(minutes=access_token_expire_minutes)
        self.refresh_token_expire = timedelta(days=refresh_token_expire_days)

    def _encode(self, payload: Dict[str, Any], secret: str, lifetime: timedelta) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            **payload,
            "iat": now,
            "exp": now + lifetime,
            # Distinguishes tokens minted in the same second
            "jti": secrets.token_hex(16),
        }
        return jwt.encode(payload, secret, algorithm=self.algorithm)

    def issue_access_token(self, claims: Dict[str, Any]) -> str:
        """
        Create an access token.

        Args:
            claims: Must contain "id"; "email", "username" and "fullName"
                are carried when present

        Returns:
            Signed JWT
        """
        user_id = claims.get("id")
        if not user_id:
            raise ValueError("Access token claims require an id")

        payload = {
            "sub": str(user_id),
            "email": claims.get("email"),
            "username": claims.get("username"),
            "fullName": claims.get("fullName"),
        }
        return self._encode(payload, self.access_secret, self.access_token_expire)

    def issue_refresh_token(self, user_id: str) -> str:
        """Create a refresh token carrying only the user ID."""
        if not user_id:
            raise ValueError("Refresh token requires a user id")
        return self._encode({"sub": str(user_id)}, self.refresh_secret, self.refresh_token_expire)

    def verify(self, token: str, secret: str) -> Dict[str, Any]:
        """
        Verify signature and expiry and return the claims.

        Raises:
            TokenExpiredError: Token is past its expiry
            TokenInvalidError: Bad signature, malformed, or no subject
        """
        if not token or not isinstance(token, str):
            raise TokenInvalidError("Token is empty")

        try:
            payload = jwt.decode(token, secret, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise TokenExpiredError("Token has expired")
        except JWTError as e:
            raise TokenInvalidError(f"Invalid token: {e}")

        if not payload.get("sub"):
            raise TokenInvalidError("Token missing user ID")

        return payload

    def verify_access_token(self, token: str) -> Dict[str, Any]:
        """Verify a token against the access secret."""
        return self.verify(token, self.access_secret)

    def verify_refresh_token(self, token: str) -> Dict[str, Any]:
        """Verify a token against the refresh secret."""
        return self.verify(token, self.refresh_secret)
