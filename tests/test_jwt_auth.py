"""Tests for the JWT access/refresh token service."""

import pytest
from jose import jwt

from common.auth import JWTAuth, TokenExpiredError, TokenInvalidError

USER_ID = "65f0c0ffee0000000000abcd"


@pytest.fixture
def auth():
    return JWTAuth(access_secret="access-secret", refresh_secret="refresh-secret")


@pytest.fixture
def claims():
    return {"id": USER_ID, "email": "neo@x.com", "username": "neo", "fullName": "Neo A"}


class TestIssue:

    def test_access_token_carries_identity_claims(self, auth, claims):
        payload = auth.verify_access_token(auth.issue_access_token(claims))
        assert payload["sub"] == USER_ID
        assert payload["email"] == "neo@x.com"
        assert payload["username"] == "neo"
        assert payload["fullName"] == "Neo A"
        assert payload["exp"] > payload["iat"]

    def test_refresh_token_carries_only_subject(self, auth):
        payload = auth.verify_refresh_token(auth.issue_refresh_token(USER_ID))
        assert payload["sub"] == USER_ID
        assert "email" not in payload
        assert "username" not in payload

    def test_tokens_minted_back_to_back_differ(self, auth):
        assert auth.issue_refresh_token(USER_ID) != auth.issue_refresh_token(USER_ID)

    def test_access_token_requires_id(self, auth):
        with pytest.raises(ValueError):
            auth.issue_access_token({"email": "neo@x.com"})

    def test_missing_secret_rejected(self):
        with pytest.raises(ValueError):
            JWTAuth(access_secret="", refresh_secret="refresh-secret")


class TestVerify:

    def test_access_token_rejected_as_refresh_token(self, auth, claims):
        token = auth.issue_access_token(claims)
        with pytest.raises(TokenInvalidError):
            auth.verify_refresh_token(token)

    def test_refresh_token_rejected_as_access_token(self, auth):
        token = auth.issue_refresh_token(USER_ID)
        with pytest.raises(TokenInvalidError):
            auth.verify_access_token(token)

    def test_expired_token_is_distinguished(self, claims):
        auth = JWTAuth(
            access_secret="access-secret",
            refresh_secret="refresh-secret",
            access_token_expire_minutes=-1,
        )
        token = auth.issue_access_token(claims)
        with pytest.raises(TokenExpiredError) as exc_info:
            auth.verify_access_token(token)
        assert exc_info.value.reason == "Token has expired"

    def test_tampered_token_is_invalid(self, auth, claims):
        token = auth.issue_access_token(claims)
        header, payload, signature = token.split(".")
        tampered = f"{header}.{payload}.{signature[::-1]}"
        with pytest.raises(TokenInvalidError):
            auth.verify_access_token(tampered)

    @pytest.mark.parametrize("token", ["", None, "not.a.jwt"])
    def test_garbage_is_invalid(self, auth, token):
        with pytest.raises(TokenInvalidError):
            auth.verify_access_token(token)

    def test_token_without_subject_is_invalid(self, auth):
        token = jwt.encode({"email": "neo@x.com"}, "access-secret", algorithm="HS256")
        with pytest.raises(TokenInvalidError) as exc_info:
            auth.verify_access_token(token)
        assert exc_info.value.reason == "Token missing user ID"
