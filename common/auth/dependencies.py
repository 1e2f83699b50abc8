"""
FastAPI authentication dependencies.

Provides a factory that builds an auth dependency from a token service and a
user loader. The access token is read from the session cookie first and from
the Authorization header second, so browser and non-browser clients share one
dependency.

Example:
    from common.auth import create_auth_dependency

    require_auth = create_auth_dependency(
        get_token_service=lambda request: request.app.state.jwt_auth,
        load_user=lambda request, user_id: users.find_by_id(user_id),
    )

    @app.get("/profile")
    async def get_profile(user: dict = Depends(require_auth)):
        return {"user_id": user["_id"]}
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from fastapi import Request

from common.auth.jwt_auth import JWTAuth, TokenError
from common.utils.exceptions import UnauthorizedException

logger = logging.getLogger(__name__)

UserLoader = Callable[[Request, str], Awaitable[Optional[Dict[str, Any]]]]


def extract_token(
    request: Request,
    cookie_name: str = "accessToken",
    header_name: str = "Authorization",
    scheme: str = "Bearer",
) -> Optional[str]:
    """
    Extract the access token from the cookie or the bearer header.

    Returns:
        Token string, or None when neither source carries one
    """
    token = request.cookies.get(cookie_name)
    if token:
        return token

    authorization = request.headers.get(header_name)
    if not authorization:
        return None

    prefix = f"{scheme} "
    if not authorization.startswith(prefix):
        return None

    return authorization[len(prefix):].strip() or None


def create_auth_dependency(
    get_token_service: Callable[[Request], JWTAuth],
    load_user: UserLoader,
    cookie_name: str = "accessToken",
    header_name: str = "Authorization",
    scheme: str = "Bearer",
):
    """
    Factory to create FastAPI auth dependencies.

    Args:
        get_token_service: Callable returning the JWTAuth for a request
        load_user: Async callable loading the sanitized user by ID
        cookie_name: Cookie holding the access token
        header_name: Header to extract token from (default: Authorization)
        scheme: Auth scheme prefix (default: Bearer)

    Returns:
        A FastAPI dependency that returns the authenticated user dict
    """

    async def get_current_user(request: Request) -> Dict[str, Any]:
        """
        Verify the access token and load its user.

        Raises:
            UnauthorizedException: If token is missing, invalid, expired,
                or its user no longer exists
        """
        token = extract_token(request, cookie_name, header_name, scheme)
        if not token:
            raise UnauthorizedException("Unauthorized request", code="AUTH_REQUIRED")

        try:
            payload = get_token_service(request).verify_access_token(token)
        except TokenError as e:
            logger.warning(f"Access token rejected: {e.reason}")
            raise UnauthorizedException(e.reason, code="INVALID_ACCESS_TOKEN")

        user = await load_user(request, payload["sub"])
        if not user:
            logger.warning(f"Access token for unknown user: {payload['sub']}")
            raise UnauthorizedException("Invalid access token", code="INVALID_ACCESS_TOKEN")

        request.state.user = user
        return user

    return get_current_user
