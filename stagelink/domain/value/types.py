"""Domain value objects for Stagelink.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and business logic.
"""

from datetime import datetime, timezone
from enum import Enum

from pydantic import Field, field_validator

from stagelink.domain.value.common import ValueObject
from stagelink.domain.value.role import Role

SECONDARY_ID_PREFIX = "secondary:"


class ProviderKind(str, Enum):
    """External identity providers an account can link."""

    KICK = "kick"  # streaming platform / chat
    TWITTER = "twitter"
    DISCORD = "discord"

    @property
    def display_name(self) -> str:
        """Human-readable provider name for failure notices."""
        return {
            ProviderKind.KICK: "Kick",
            ProviderKind.TWITTER: "Twitter",
            ProviderKind.DISCORD: "Discord",
        }[self]


class IdentityKind(str, Enum):
    """Which kind of session produced a resolved identity."""

    PRIMARY = "primary"
    SECONDARY = "secondary"


class OAuthIntent(str, Enum):
    """What a completed OAuth flow should do with the exchanged profile."""

    LINK = "link"  # attach to the signed-in primary account
    SIGN_IN = "sign_in"  # establish a secondary session without an account


class ExternalProfile(ValueObject):
    """Provider profile normalized to the fields the linker stores."""

    provider: ProviderKind
    id: str
    username: str
    display_name: str | None = None
    avatar_url: str | None = None

    @field_validator("id", "username")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("Profile id and username must not be empty")
        return v


class ExchangeResult(ValueObject):
    """Outcome of a successful code exchange."""

    access_token: str
    profile: ExternalProfile


class OAuthAttempt(ValueObject):
    """A single pending authorization redirect.

    Lives only in the client-context store between ``begin`` and the
    matching callback.
    """

    provider: ProviderKind
    state: str
    intent: OAuthIntent
    redirect_uri: str
    code_verifier: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def is_expired(self, ttl_seconds: int, now: datetime | None = None) -> bool:
        now = now or datetime.now(timezone.utc)
        return (now - self.created_at).total_seconds() > ttl_seconds


class AuthorizationRedirect(ValueObject):
    """Where to send the browser to start an OAuth flow."""

    provider: ProviderKind
    authorization_url: str
    state: str


class PrimarySession(ValueObject):
    """Authenticated session with the system of record."""

    id: str


class SecondaryClientRecord(ValueObject):
    """Secondary sign-in record kept in the client-context store."""

    provider: ProviderKind = ProviderKind.KICK
    id: str
    username: str | None = None
    display_name: str | None = None
    avatar_url: str | None = None
    authenticated: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: object) -> object:
        # Platform ids arrive as JSON numbers
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("id")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Secondary id must not be empty")
        return v


class SessionIdentity(ValueObject):
    """Resolved logical identity used for every access decision."""

    kind: IdentityKind
    id: str

    @classmethod
    def primary(cls, subject_id: str) -> "SessionIdentity":
        return cls(kind=IdentityKind.PRIMARY, id=subject_id)

    @classmethod
    def secondary(cls, provider_user_id: str) -> "SessionIdentity":
        return cls(
            kind=IdentityKind.SECONDARY, id=f"{SECONDARY_ID_PREFIX}{provider_user_id}"
        )

    @property
    def is_primary(self) -> bool:
        return self.kind is IdentityKind.PRIMARY


class FeatureAccessMap(ValueObject):
    """Per-feature access decisions for one identity.

    Missing entries mean "unknown" and are always denied.
    """

    grants: dict[str, bool] = Field(default_factory=dict)

    def allows(self, feature_name: str) -> bool:
        return self.grants.get(feature_name, False) is True


class RiskAssessment(ValueObject):
    """IP reputation signals for one address."""

    is_proxy: bool = False
    is_vpn: bool = False
    is_tor: bool = False
    proxy_type: str | None = None
    risk_score: int = Field(default=0, ge=0, le=100)
    country_code: str | None = None
    country_name: str | None = None
    provider_name: str | None = None

    @classmethod
    def neutral(cls) -> "RiskAssessment":
        """Zero-risk result used when the reputation lookup fails."""
        return cls()


__all__ = [
    "SECONDARY_ID_PREFIX",
    "AuthorizationRedirect",
    "ExchangeResult",
    "ExternalProfile",
    "FeatureAccessMap",
    "IdentityKind",
    "OAuthAttempt",
    "OAuthIntent",
    "PrimarySession",
    "ProviderKind",
    "RiskAssessment",
    "Role",
    "SecondaryClientRecord",
    "SessionIdentity",
]
