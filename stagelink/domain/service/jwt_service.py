"""Primary session token service."""

from collections.abc import Mapping
from typing import Optional

import logfire

from stagelink.config import AuthSettings
from stagelink.domain.value import PrimarySession
from stagelink.util.jwt import TokenPayload, create_token, verify_token

from .base import Service


class JWTService(Service):
    """Issues and verifies primary session tokens."""

    def __init__(self, auth_settings: AuthSettings) -> None:
        """Initialize JWT service.

        Args:
            auth_settings: Authentication settings
        """
        self.auth_settings = auth_settings

    def create_token(self, subject_id: str) -> str:
        """Create a session token for a primary subject."""
        with logfire.span("jwt_service.create_token", subject_id=subject_id):
            return create_token(subject_id, self.auth_settings)

    def verify_token(self, token: str) -> TokenPayload:
        """Verify a token and extract its payload.

        Raises:
            JWTError: If token is invalid or expired
        """
        with logfire.span("jwt_service.verify_token"):
            try:
                return verify_token(token, self.auth_settings)
            except Exception as e:
                logfire.warn("JWT token verification failed", error=str(e))
                raise

    def get_primary_session(self, token: Optional[str]) -> Optional[PrimarySession]:
        """Primary session for a cookie value without raising.

        Args:
            token: Session cookie value (optional)

        Returns:
            Primary session if the token is valid, None if missing or invalid
        """
        if not token:
            return None

        try:
            payload = self.verify_token(token)
        except Exception as e:
            # Invalid or expired token, treat as unauthenticated
            logfire.debug(
                "JWT verification failed, treating as unauthenticated", error=str(e)
            )
            return None
        return PrimarySession(id=payload.subject_id)

    def session_from_cookies(
        self, cookies: Mapping[str, str]
    ) -> Optional[PrimarySession]:
        """Primary session carried in the configured session cookie, if valid."""
        return self.get_primary_session(cookies.get(self.auth_settings.session_cookie))
