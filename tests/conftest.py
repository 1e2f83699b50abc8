"""Shared test fixtures for VidTube backend tests."""

import copy
import os
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from common.auth import JWTAuth
from common.media import MediaStorage, MediaUploadResult
from common.utils.password import PasswordHasher
from vidtube.auth.services.credential_store import CredentialStore
from vidtube.auth.services.registration_service import RegistrationService
from vidtube.auth.services.session_manager import SessionManager
from vidtube.config import Settings

ACCESS_SECRET = "test-access-secret"
REFRESH_SECRET = "test-refresh-secret"


# ─────────────────────────────────────────────────────────────────
# In-memory collection
# ─────────────────────────────────────────────────────────────────


def _matches(doc: dict, query: dict) -> bool:
    for key, expected in query.items():
        if key == "$or":
            if not any(_matches(doc, clause) for clause in expected):
                return False
        elif key not in doc or doc[key] != expected:
            return False
    return True


def _apply_update(doc: dict, update: dict) -> None:
    for key, value in update.get("$set", {}).items():
        doc[key] = value
    for key in update.get("$unset", {}):
        doc.pop(key, None)
    for key, value in update.get("$push", {}).items():
        doc.setdefault(key, []).append(value)


class InMemoryCollection:
    """
    Just enough of a Motor collection for the credential store.

    Supports equality and $or filters, $set/$unset/$push updates and
    unique single-field indexes.
    """

    def __init__(self):
        self.docs = []
        self.unique_fields = set()

    async def create_index(self, field, unique=False):
        if unique:
            self.unique_fields.add(field)
        return f"{field}_1"

    async def find_one(self, query, projection=None):
        for doc in self.docs:
            if _matches(doc, query):
                return copy.deepcopy(doc)
        return None

    async def insert_one(self, doc):
        for field in self.unique_fields:
            if any(d.get(field) == doc.get(field) for d in self.docs):
                raise DuplicateKeyError(f"E11000 duplicate key error: {field}")
        doc.setdefault("_id", ObjectId())
        self.docs.append(copy.deepcopy(doc))
        return SimpleNamespace(inserted_id=doc["_id"])

    async def update_one(self, query, update):
        for doc in self.docs:
            if _matches(doc, query):
                _apply_update(doc, update)
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)

    async def find_one_and_update(self, query, update, projection=None, return_document=None):
        for doc in self.docs:
            if _matches(doc, query):
                _apply_update(doc, update)
                return copy.deepcopy(doc)
        return None


class InMemoryDatabase:
    def __init__(self):
        self._collections = {}

    def __getitem__(self, name):
        return self._collections.setdefault(name, InMemoryCollection())


# ─────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────


@pytest.fixture
def test_settings(tmp_path):
    return Settings(
        _env_file=None,
        ACCESS_TOKEN_SECRET=ACCESS_SECRET,
        REFRESH_TOKEN_SECRET=REFRESH_SECRET,
        BCRYPT_ROUNDS=4,
        UPLOAD_TMP_DIR=str(tmp_path / "uploads"),
        ENVIRONMENT="test",
    )


@pytest.fixture
def fake_db():
    return InMemoryDatabase()


@pytest.fixture
def users_collection(fake_db):
    return fake_db["users"]


@pytest.fixture
def password_hasher():
    return PasswordHasher(rounds=4)


@pytest.fixture
def jwt_auth():
    return JWTAuth(access_secret=ACCESS_SECRET, refresh_secret=REFRESH_SECRET)


@pytest.fixture
def credential_store(fake_db, password_hasher):
    return CredentialStore(db=fake_db, password_hasher=password_hasher)


@pytest.fixture
def session_manager(credential_store, jwt_auth):
    return SessionManager(credential_store=credential_store, jwt_auth=jwt_auth)


@pytest.fixture
def mock_media_storage():
    async def _upload(local_path, resource_type="auto"):
        name = os.path.basename(local_path)
        return MediaUploadResult(
            url=f"https://cdn.test/{resource_type}/{name}",
            public_id=f"vidtube/{name}",
            resource_type=resource_type,
        )

    storage = MagicMock(spec=MediaStorage)
    storage.upload = AsyncMock(side_effect=_upload)
    return storage


@pytest.fixture
def registration_service(credential_store, mock_media_storage):
    return RegistrationService(credential_store=credential_store, media_storage=mock_media_storage)


@pytest.fixture
def sample_user_id():
    return str(ObjectId())


@pytest.fixture
def mock_collection():
    collection = AsyncMock()
    # Motor's find() returns a cursor synchronously
    collection.find = MagicMock()
    return collection


@pytest.fixture
def mock_db(mock_collection):
    db = MagicMock()
    db.__getitem__ = MagicMock(return_value=mock_collection)
    return db


@pytest.fixture
def neo():
    """Registration form of the reference user."""
    return {
        "username": "neo",
        "email": "neo@x.com",
        "full_name": "Neo A",
        "password": "p@ss1234",
    }


@pytest.fixture
def make_user(credential_store):
    """Create a user record directly in the store; keyword overrides per field."""

    async def _make_user(**overrides) -> dict:
        fields = {
            "username": "neo",
            "email": "neo@x.com",
            "full_name": "Neo A",
            "password": "p@ss1234",
            "avatar_url": "https://cdn.test/image/avatar.png",
        }
        fields.update(overrides)
        return await credential_store.create(**fields)

    return _make_user
