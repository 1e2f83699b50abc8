"""
Credential store for user records.

Owns the `users` collection: creation with a hashed password, lookups,
password verification and the single persisted refresh token.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Any, Dict, List

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from common.utils.exceptions import (
    ConflictException,
    InternalServerException,
    ValidationException,
)
from common.utils.password import PasswordHasher

logger = logging.getLogger(__name__)

SECRET_FIELDS = ("password", "refreshToken")


def normalize_identifier(value: Optional[str]) -> str:
    """Trim and lower-case a username or email."""
    return (value or "").strip().lower()


def to_object_id(user_id: Any) -> Optional[ObjectId]:
    """Coerce a user ID to ObjectId, or None if it is malformed."""
    if isinstance(user_id, ObjectId):
        return user_id
    try:
        return ObjectId(str(user_id))
    except (InvalidId, TypeError):
        return None


def to_public(user: Optional[dict]) -> Optional[dict]:
    """
    Sanitized projection of a user record.

    Drops the password hash and refresh token and renders ObjectIds as strings.
    """
    if user is None:
        return None

    public = {k: v for k, v in user.items() if k not in SECRET_FIELDS}
    public["_id"] = str(user["_id"])
    public["watchHistory"] = [str(v) for v in user.get("watchHistory", [])]
    return public


class CredentialStore:
    """
    Manages user credentials.
    Each user holds at most one refresh token, stored on the user document.
    """

    def __init__(self, db: AsyncIOMotorDatabase, password_hasher: PasswordHasher):
        """
        Initialize CredentialStore.

        Args:
            db: MongoDB database connection
            password_hasher: Hasher used for new and changed passwords
        """
        self._db = db
        self._hasher = password_hasher
        self._users_collection = db["users"]

    async def ensure_indexes(self) -> None:
        """Create the unique indexes backing username/email uniqueness."""
        await self._users_collection.create_index("username", unique=True)
        await self._users_collection.create_index("email", unique=True)

    async def create(
        self,
        username: str,
        email: str,
        full_name: str,
        password: str,
        avatar_url: str,
        cover_image_url: Optional[str] = None,
    ) -> dict:
        """
        Create a new user record.

        Args:
            username: Desired username (normalized before storage)
            email: Email address (normalized before storage)
            full_name: Display name
            password: Plaintext password, hashed before storage
            avatar_url: URL of the uploaded avatar
            cover_image_url: URL of the uploaded cover image, if any

        Returns:
            Sanitized projection of the created user

        Raises:
            ValidationException: A required field is blank
            ConflictException: Username or email already taken
            InternalServerException: The record could not be read back
        """
        fields = {
            "username": username,
            "email": email,
            "fullName": full_name,
            "password": password,
            "avatar": avatar_url,
        }
        missing = [name for name, value in fields.items() if not (value or "").strip()]
        if missing:
            raise ValidationException(
                message="All fields are required",
                code="MISSING_FIELDS",
                errors=missing,
            )

        username = normalize_identifier(username)
        email = normalize_identifier(email)

        if await self.exists(username, email):
            raise ConflictException(
                message="User with email or username already exists",
                code="USER_ALREADY_EXISTS",
            )

        now = datetime.now(timezone.utc)
        user_doc = {
            "username": username,
            "email": email,
            "fullName": full_name.strip(),
            "avatar": avatar_url,
            "coverImage": cover_image_url or "",
            "watchHistory": [],
            "password": self._hasher.hash(password),
            "createdAt": now,
            "updatedAt": now,
        }

        try:
            result = await self._users_collection.insert_one(user_doc)
        except DuplicateKeyError:
            raise ConflictException(
                message="User with email or username already exists",
                code="USER_ALREADY_EXISTS",
            )

        created = await self.find_by_id(result.inserted_id)
        if not created:
            raise InternalServerException("Something went wrong while registering the user")

        logger.info(f"User created: {result.inserted_id}")
        return to_public(created)

    async def exists(self, username: str, email: str) -> bool:
        """Check whether a normalized username or email is already taken."""
        clauses: List[Dict[str, str]] = []
        if username:
            clauses.append({"username": normalize_identifier(username)})
        if email:
            clauses.append({"email": normalize_identifier(email)})
        if not clauses:
            return False

        existing = await self._users_collection.find_one({"$or": clauses}, {"_id": 1})
        return existing is not None

    async def find_by_username_or_email(
        self,
        username: Optional[str] = None,
        email: Optional[str] = None,
    ) -> Optional[dict]:
        """
        Load a user by username or by email.

        Each value is compared, normalized, against its own field only.

        Args:
            username: Username to match against `username`
            email: Email to match against `email`

        Returns:
            Full user document or None if not found
        """
        clauses: List[Dict[str, str]] = []
        if normalize_identifier(username):
            clauses.append({"username": normalize_identifier(username)})
        if normalize_identifier(email):
            clauses.append({"email": normalize_identifier(email)})
        if not clauses:
            return None

        return await self._users_collection.find_one({"$or": clauses})

    async def find_by_id(self, user_id: Any) -> Optional[dict]:
        """
        Load user by MongoDB ID.

        Args:
            user_id: ObjectId or its string form

        Returns:
            Full user document or None if not found or malformed
        """
        oid = to_object_id(user_id)
        if oid is None:
            return None
        return await self._users_collection.find_one({"_id": oid})

    def verify_password(self, user: Optional[dict], candidate: Optional[str]) -> bool:
        """Check a candidate password against the user's stored hash. Never raises."""
        if not user or not candidate:
            return False
        return self._hasher.verify(candidate, user.get("password") or "")

    async def set_refresh_token(self, user_id: Any, token: Optional[str]) -> None:
        """
        Overwrite the persisted refresh token.

        Args:
            user_id: MongoDB user ID
            token: New token, or None to remove the field entirely
        """
        now = datetime.now(timezone.utc)
        if token is None:
            update = {"$unset": {"refreshToken": ""}, "$set": {"updatedAt": now}}
        else:
            update = {"$set": {"refreshToken": token, "updatedAt": now}}

        await self._users_collection.update_one({"_id": to_object_id(user_id)}, update)

    async def rotate_refresh_token(self, user_id: Any, expected: str, new_token: str) -> bool:
        """
        Replace the refresh token only if it still equals `expected`.

        The filter and the write happen in one server-side operation, so of
        two concurrent rotations with the same token only one succeeds.

        Returns:
            True if the token was swapped, False if it had already changed
        """
        updated = await self._users_collection.find_one_and_update(
            {"_id": to_object_id(user_id), "refreshToken": expected},
            {"$set": {"refreshToken": new_token, "updatedAt": datetime.now(timezone.utc)}},
            projection={"_id": 1},
            return_document=ReturnDocument.AFTER,
        )
        return updated is not None

    async def update_password(self, user_id: Any, new_password: str) -> None:
        """
        Rehash and persist a new password.

        The caller must already have verified the old password.
        """
        if not (new_password or "").strip():
            raise ValidationException("New password is required", code="MISSING_FIELDS", errors=["newPassword"])

        await self._users_collection.update_one(
            {"_id": to_object_id(user_id)},
            {"$set": {
                "password": self._hasher.hash(new_password),
                "updatedAt": datetime.now(timezone.utc),
            }},
        )
        logger.info(f"Password updated for user {user_id}")
