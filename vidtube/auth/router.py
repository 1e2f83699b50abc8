"""
FastAPI router for Auth system endpoints.

Provides registration, login, logout, token refresh and password change.
Session tokens travel in HttpOnly cookies; non-cookie clients can use the
tokens returned in the response body.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, File, Form, Request, Response, UploadFile, status

from common.utils import success_response
from vidtube.auth.schemas import ChangePasswordRequest, LoginRequest, RefreshTokenRequest
from vidtube.auth.services.registration_service import RegistrationService
from vidtube.auth.services.session_manager import SessionManager, SessionTokens
from vidtube.config import Settings
from vidtube.dependencies import (
    get_registration_service,
    get_session_manager,
    get_settings,
    require_auth,
)
from vidtube.uploads import staged

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"


def _cookie_options(settings: Settings) -> dict:
    return {
        "httponly": True,
        "secure": settings.COOKIE_SECURE,
        "samesite": settings.COOKIE_SAMESITE,
        "path": "/",
    }


def set_session_cookies(response: Response, tokens: SessionTokens, settings: Settings) -> None:
    """Write both session cookies."""
    options = _cookie_options(settings)
    response.set_cookie(
        ACCESS_COOKIE,
        tokens.access_token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        **options,
    )
    response.set_cookie(
        REFRESH_COOKIE,
        tokens.refresh_token,
        max_age=settings.REFRESH_TOKEN_EXPIRE_DAYS * 86400,
        **options,
    )


def clear_session_cookies(response: Response, settings: Settings) -> None:
    """Expire both session cookies."""
    options = _cookie_options(settings)
    response.delete_cookie(ACCESS_COOKIE, **options)
    response.delete_cookie(REFRESH_COOKIE, **options)


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    registration: Annotated[RegistrationService, Depends(get_registration_service)],
    settings: Annotated[Settings, Depends(get_settings)],
    username: Annotated[Optional[str], Form()] = None,
    email: Annotated[Optional[str], Form()] = None,
    fullName: Annotated[Optional[str], Form()] = None,
    password: Annotated[Optional[str], Form()] = None,
    avatar: Annotated[Optional[UploadFile], File()] = None,
    coverImage: Annotated[Optional[UploadFile], File()] = None,
):
    """
    Register a new user account.

    Multipart form with the account fields, an `avatar` file and an optional
    `coverImage` file.
    """
    async with staged(avatar, settings.UPLOAD_TMP_DIR) as avatar_path, \
            staged(coverImage, settings.UPLOAD_TMP_DIR) as cover_image_path:
        user = await registration.register(
            username=username,
            email=email,
            full_name=fullName,
            password=password,
            avatar_path=avatar_path,
            cover_image_path=cover_image_path,
        )

    return success_response(user, message="User registered successfully", status_code=201)


@router.post("/login")
async def login(
    body: LoginRequest,
    response: Response,
    session_manager: Annotated[SessionManager, Depends(get_session_manager)],
    settings: Annotated[Settings, Depends(get_settings)],
):
    """
    Login with username or email and password.

    Sets the accessToken and refreshToken cookies.
    """
    result = await session_manager.login(
        password=body.password,
        username=body.username,
        email=body.email,
    )
    set_session_cookies(response, result.tokens, settings)

    return success_response(
        {
            "user": result.user,
            "accessToken": result.tokens.access_token,
            "refreshToken": result.tokens.refresh_token,
        },
        message="User logged in successfully",
    )


@router.post("/logout")
async def logout(
    response: Response,
    user: Annotated[dict, Depends(require_auth)],
    session_manager: Annotated[SessionManager, Depends(get_session_manager)],
    settings: Annotated[Settings, Depends(get_settings)],
):
    """
    Logout from the current session.

    Removes the stored refresh token and clears the session cookies.
    """
    await session_manager.logout(user["_id"])
    clear_session_cookies(response, settings)
    return success_response({}, message="User logged out")


@router.post("/refresh-token")
async def refresh_token(
    request: Request,
    response: Response,
    session_manager: Annotated[SessionManager, Depends(get_session_manager)],
    settings: Annotated[Settings, Depends(get_settings)],
    body: Optional[RefreshTokenRequest] = None,
):
    """
    Exchange a refresh token for a new token pair.

    The token is read from the refreshToken cookie, or from the request body
    for clients that do not keep cookies.
    """
    presented = request.cookies.get(REFRESH_COOKIE) or (body.refreshToken if body else None)

    tokens = await session_manager.refresh(presented)
    set_session_cookies(response, tokens, settings)

    return success_response(
        {
            "accessToken": tokens.access_token,
            "refreshToken": tokens.refresh_token,
        },
        message="Access token refreshed",
    )


@router.post("/change-password")
async def change_password(
    body: ChangePasswordRequest,
    user: Annotated[dict, Depends(require_auth)],
    session_manager: Annotated[SessionManager, Depends(get_session_manager)],
):
    """
    Change the current user's password.

    Requires the old password. Active sessions stay valid.
    """
    await session_manager.change_password(
        user_id=user["_id"],
        old_password=body.oldPassword,
        new_password=body.newPassword,
    )
    return success_response({}, message="Password changed successfully")


@router.get("/current-user")
async def current_user(
    user: Annotated[dict, Depends(require_auth)],
):
    """Get the authenticated user's sanitized record."""
    return success_response(user, message="Current user fetched successfully")
