"""Auth services."""

from vidtube.auth.services.credential_store import CredentialStore, to_public
from vidtube.auth.services.session_manager import SessionManager, SessionTokens, LoginResult
from vidtube.auth.services.registration_service import RegistrationService

__all__ = [
    "CredentialStore",
    "to_public",
    "SessionManager",
    "SessionTokens",
    "LoginResult",
    "RegistrationService",
]
