"""JWT session token utilities.

The primary session is a signed JWT carried in the session cookie. Its
``subject_id`` is the primary provider subject and the account key.
"""

from datetime import datetime, timedelta, timezone

import jwt
from pydantic import BaseModel

from stagelink.config import AuthSettings


class TokenPayload(BaseModel):
    """JWT token payload."""

    subject_id: str
    exp: datetime


class JWTError(Exception):
    """JWT-related error."""

    pass


def create_token(subject_id: str, settings: AuthSettings) -> str:
    """Create a session token for a primary subject.

    Args:
        subject_id: Primary subject id
        settings: Authentication settings

    Returns:
        Encoded JWT token
    """
    expiry = datetime.now(timezone.utc) + timedelta(days=settings.jwt_expiry_days)

    payload = {
        "subject_id": subject_id,
        "exp": expiry,
    }

    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str, settings: AuthSettings) -> TokenPayload:
    """Verify and decode a session token.

    Args:
        token: JWT token to verify
        settings: Authentication settings

    Returns:
        Token payload if valid

    Raises:
        JWTError: If token is invalid or expired
    """
    try:
        payload = jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm]
        )
        return TokenPayload(**payload)
    except jwt.ExpiredSignatureError:
        raise JWTError("Token has expired")
    except (jwt.InvalidTokenError, ValueError):
        raise JWTError("Invalid token")
