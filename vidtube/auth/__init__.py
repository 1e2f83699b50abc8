"""
Auth System

Handles registration, credential storage and the cookie-based session
protocol built on access/refresh tokens.
"""

from vidtube.auth.services import (
    CredentialStore,
    SessionManager,
    RegistrationService,
)

__all__ = [
    "CredentialStore",
    "SessionManager",
    "RegistrationService",
]
