"""Domain layer errors.

Every error carries a stable ``code`` so the interface layer can turn it into
a redirect or response without inspecting messages.
"""

from enum import Enum


class DomainError(Exception):
    """Base domain error."""

    code = "domain_error"


class ValidationError(DomainError):
    """Domain validation error."""

    code = "validation_error"


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    code = "not_found"

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class RepositoryWriteError(DomainError):
    """Storage rejected a write (constraint, permission, connection)."""

    code = "repository_write_failed"


class NotAuthorizedError(DomainError):
    """Raised when the caller's role does not permit an operation."""

    code = "not_authorized"

    def __init__(self, operation: str, identity_id: str | None):
        self.operation = operation
        super().__init__(f"Identity {identity_id} is not authorized to {operation}")


# ---------------------------------------------------------------------------
# OAuth flow errors
# ---------------------------------------------------------------------------


class OAuthFlowError(DomainError):
    """Base class for errors that terminate an OAuth callback."""

    code = "oauth_error"


class StateMismatchError(OAuthFlowError):
    """Returned state does not match the stored attempt (possible forgery)."""

    code = "state_mismatch"

    def __init__(self) -> None:
        super().__init__("OAuth state does not match the stored attempt")


class AttemptExpiredError(OAuthFlowError):
    """No usable stored attempt: never created, already consumed, or too old."""

    code = "attempt_expired"

    def __init__(self, detail: str = "No pending OAuth attempt for this callback"):
        super().__init__(detail)


class PkceMismatchError(OAuthFlowError):
    """PKCE verifier is missing or rejected by the provider."""

    code = "pkce_mismatch"

    def __init__(self, provider: str, detail: str = "PKCE verifier mismatch"):
        self.provider = provider
        super().__init__(f"{provider}: {detail}")


class ExchangeFailure(str, Enum):
    """Why a code exchange failed."""

    UPSTREAM_REJECTED = "upstream_rejected"
    CODE_ALREADY_USED = "code_already_used"


class ExchangeError(OAuthFlowError):
    """Code-to-token or token-to-profile exchange failed."""

    code = "exchange_failed"

    def __init__(
        self,
        provider: str,
        reason: ExchangeFailure,
        status_code: int | None = None,
        raw_body: str | None = None,
    ):
        self.provider = provider
        self.reason = reason
        self.status_code = status_code
        self.raw_body = raw_body
        status = f" (HTTP {status_code})" if status_code is not None else ""
        super().__init__(f"{provider} exchange failed: {reason.value}{status}")


class MissingCodeError(OAuthFlowError):
    """Callback carried neither an authorization code nor an error."""

    code = "missing_code"

    def __init__(self) -> None:
        super().__init__("No authorization code received")


class AuthorizationDeniedError(OAuthFlowError):
    """Provider redirected back with an ``error`` parameter."""

    code = "authorization_denied"

    def __init__(self, provider: str, error: str, description: str | None = None):
        self.provider = provider
        self.error = error
        super().__init__(f"{provider} authorization failed: {description or error}")


class NotAuthenticatedError(OAuthFlowError):
    """Operation requires a primary account session."""

    code = "not_authenticated"

    def __init__(self, detail: str = "A signed-in account is required") -> None:
        super().__init__(detail)


class LinkPersistFailedError(OAuthFlowError):
    """Backend rejected the link or unlink write."""

    code = "link_persist_failed"

    def __init__(self, provider: str, detail: str):
        self.provider = provider
        super().__init__(f"Could not save {provider} link: {detail}")


# ---------------------------------------------------------------------------
# Absorbed errors (logged, replaced by safe defaults)
# ---------------------------------------------------------------------------


class RoleLookupFailedError(DomainError):
    """Role lookup failed; callers fall back to the lowest role."""

    code = "role_lookup_failed"


class FeatureLookupFailedError(DomainError):
    """Feature catalog or per-feature check failed; callers deny."""

    code = "feature_lookup_failed"


class RiskIntakeError(DomainError):
    """Risk record could not be written. Never fatal to the session."""

    code = "risk_intake_failed"
