"""Tests for PasswordHasher."""

import pytest

from common.utils.password import PasswordHasher


@pytest.fixture
def hasher():
    return PasswordHasher(rounds=4)


class TestPasswordHasher:

    def test_hash_is_not_plaintext(self, hasher):
        hashed = hasher.hash("p@ss1234")
        assert hashed != "p@ss1234"
        assert hashed.startswith("$2")

    def test_verify_correct_password(self, hasher):
        hashed = hasher.hash("p@ss1234")
        assert hasher.verify("p@ss1234", hashed) is True

    def test_verify_wrong_password(self, hasher):
        hashed = hasher.hash("p@ss1234")
        assert hasher.verify("wrong", hashed) is False

    def test_same_password_hashes_differently(self, hasher):
        assert hasher.hash("p@ss1234") != hasher.hash("p@ss1234")

    def test_long_passwords_are_not_truncated(self, hasher):
        """bcrypt alone ignores bytes past 72; the pre-hash keeps them."""
        base = "a" * 80
        hashed = hasher.hash(base + "x")
        assert hasher.verify(base + "y", hashed) is False

    @pytest.mark.parametrize("stored", ["", "not-a-bcrypt-hash", None])
    def test_verify_never_raises_on_bad_hash(self, hasher, stored):
        assert hasher.verify("p@ss1234", stored) is False
