"""Interface layer error mapping.

JSON endpoints turn domain errors into HTTP errors; the OAuth callback turns
them into a redirect to the frontend error page.
"""

from urllib.parse import urlencode

from fastapi import HTTPException, status

from stagelink.domain.error import (
    DomainError,
    LinkPersistFailedError,
    NotAuthenticatedError,
    NotAuthorizedError,
    NotFoundError,
    ValidationError,
)
from stagelink.domain.value import ProviderKind

_STATUS_BY_ERROR: list[tuple[type[DomainError], int]] = [
    (NotAuthenticatedError, status.HTTP_401_UNAUTHORIZED),
    (NotAuthorizedError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (LinkPersistFailedError, status.HTTP_409_CONFLICT),
]


def to_http_exception(error: DomainError) -> HTTPException:
    """HTTP error carrying the domain error's code and message."""
    status_code = next(
        (code for cls, code in _STATUS_BY_ERROR if isinstance(error, cls)),
        status.HTTP_400_BAD_REQUEST,
    )
    return HTTPException(
        status_code=status_code,
        detail={"error": error.code, "message": str(error)},
    )


def error_redirect_url(
    frontend_url: str, provider: ProviderKind, code: str, message: str
) -> str:
    """Frontend error page URL naming the provider that failed."""
    query = urlencode(
        {"provider": provider.display_name, "error": code, "message": message}
    )
    return f"{frontend_url}/auth/error?{query}"
