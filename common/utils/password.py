"""
Password hashing with bcrypt.

Passwords are pre-hashed with SHA-256 before bcrypt, which sidesteps bcrypt's
72-byte input limit and gives consistent behaviour for any password length.

Example:
    from common.utils import PasswordHasher

    hasher = PasswordHasher(rounds=12)
    hashed = hasher.hash("p@ss1234")
    hasher.verify("p@ss1234", hashed)  # True
"""

import base64
import hashlib

import bcrypt as bcrypt_lib


class PasswordHasher:
    """
    Salted one-way password hashing.

    The cost factor is configuration; bcrypt embeds it in each hash, so
    changing it only affects hashes created afterwards.
    """

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def _prehash_password(self, password: str) -> bytes:
        sha256_hash = hashlib.sha256(password.encode("utf-8")).digest()
        return base64.b64encode(sha256_hash)

    def hash(self, password: str) -> str:
        """Hash a password using bcrypt with SHA-256 pre-hashing."""
        salt = bcrypt_lib.gensalt(rounds=self.rounds)
        return bcrypt_lib.hashpw(self._prehash_password(password), salt).decode("utf-8")

    def verify(self, password: str, hashed: str) -> bool:
        """
        Verify a password against its hash.

        Never raises: a malformed hash or non-string input is a mismatch.
        bcrypt.checkpw compares in constant time.
        """
        if not isinstance(password, str) or not isinstance(hashed, str) or not hashed:
            return False

        try:
            return bcrypt_lib.checkpw(
                self._prehash_password(password),
                hashed.encode("utf-8"),
            )
        except ValueError:
            return False
