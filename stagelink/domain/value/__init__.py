"""Domain value objects for Stagelink."""

from stagelink.domain.value.identifiers import (
    AccountId,
    ClientContextId,
    RiskRecordId,
)
from stagelink.domain.value.role import (
    Role,
    can_access_admin_panel,
    can_access_operator_panel,
    has_role_at_least,
    is_verified_viewer,
)
from stagelink.domain.value.types import (
    AuthorizationRedirect,
    ExchangeResult,
    ExternalProfile,
    FeatureAccessMap,
    IdentityKind,
    OAuthAttempt,
    OAuthIntent,
    PrimarySession,
    ProviderKind,
    RiskAssessment,
    SecondaryClientRecord,
    SessionIdentity,
)

__all__ = [
    # Identifiers
    "AccountId",
    "ClientContextId",
    "RiskRecordId",
    # Roles
    "Role",
    "has_role_at_least",
    "is_verified_viewer",
    "can_access_operator_panel",
    "can_access_admin_panel",
    # Types
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
    "SecondaryClientRecord",
    "SessionIdentity",
]
