"""
FastAPI dependencies for the VidTube application.

Services are built once at startup from an explicit database handle and kept
on `app.state.services`; route handlers reach them through the request.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from common.auth import JWTAuth, create_auth_dependency
from common.media import MediaStorage, CloudinaryStorage
from common.utils.password import PasswordHasher
from vidtube.auth.services.credential_store import CredentialStore, to_public
from vidtube.auth.services.registration_service import RegistrationService
from vidtube.auth.services.session_manager import SessionManager
from vidtube.config import Settings
from vidtube.videos.services.video_service import VideoService


@dataclass
class Services:
    """Everything the routers need, wired together."""
    settings: Settings
    jwt_auth: JWTAuth
    credential_store: CredentialStore
    session_manager: SessionManager
    registration_service: RegistrationService
    video_service: VideoService
    media_storage: MediaStorage


def build_media_storage(settings: Settings) -> MediaStorage:
    """Create the configured media storage provider."""
    return CloudinaryStorage(
        cloud_name=settings.CLOUDINARY_CLOUD_NAME or "",
        api_key=settings.CLOUDINARY_API_KEY or "",
        api_secret=settings.CLOUDINARY_API_SECRET or "",
        folder=settings.CLOUDINARY_FOLDER,
    )


def build_services(
    db: AsyncIOMotorDatabase,
    settings: Settings,
    media_storage: Optional[MediaStorage] = None,
) -> Services:
    """
    Build all services around one database handle.

    Args:
        db: MongoDB database connection
        settings: Application settings
        media_storage: Override for the upload provider (tests)

    Returns:
        Services container
    """
    jwt_auth = JWTAuth(
        access_secret=settings.ACCESS_TOKEN_SECRET,
        refresh_secret=settings.REFRESH_TOKEN_SECRET,
        algorithm=settings.JWT_ALGORITHM,
        access_token_expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
        refresh_token_expire_days=settings.REFRESH_TOKEN_EXPIRE_DAYS,
    )
    media_storage = media_storage or build_media_storage(settings)

    credential_store = CredentialStore(
        db=db,
        password_hasher=PasswordHasher(rounds=settings.BCRYPT_ROUNDS),
    )

    return Services(
        settings=settings,
        jwt_auth=jwt_auth,
        credential_store=credential_store,
        session_manager=SessionManager(credential_store=credential_store, jwt_auth=jwt_auth),
        registration_service=RegistrationService(
            credential_store=credential_store,
            media_storage=media_storage,
        ),
        video_service=VideoService(
            db=db,
            media_storage=media_storage,
            max_limit=settings.VIDEO_PAGE_MAX_LIMIT,
        ),
        media_storage=media_storage,
    )


def get_services(request: Request) -> Services:
    """Get the service container of the running app."""
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise RuntimeError("Services not initialized. Call build_services at startup.")
    return services


def get_settings(request: Request) -> Settings:
    return get_services(request).settings


def get_session_manager(request: Request) -> SessionManager:
    return get_services(request).session_manager


def get_registration_service(request: Request) -> RegistrationService:
    return get_services(request).registration_service


def get_video_service(request: Request) -> VideoService:
    return get_services(request).video_service


async def _load_public_user(request: Request, user_id: str) -> Optional[dict]:
    user = await get_services(request).credential_store.find_by_id(user_id)
    return to_public(user)


require_auth = create_auth_dependency(
    get_token_service=lambda request: get_services(request).jwt_auth,
    load_user=_load_public_user,
)
