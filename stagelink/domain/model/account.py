"""Account aggregate root.

One account per primary identity. External provider identities are attached
to it as linked identities, at most one per provider kind.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import Field

from stagelink.domain.model.common import DomainModel
from stagelink.domain.value import AccountId, ExternalProfile, ProviderKind, Role


class LinkedIdentity(DomainModel):
    """External provider identity attached to an account.

    Always complete: the account either holds the whole identity for a
    provider kind or nothing for it.
    """

    provider_user_id: str
    username: str
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    linked_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_profile(cls, profile: ExternalProfile) -> "LinkedIdentity":
        return cls(
            provider_user_id=profile.id,
            username=profile.username,
            display_name=profile.display_name or profile.username,
            avatar_url=profile.avatar_url,
        )


class Account(DomainModel):
    """Durable identity record keyed by the primary subject id."""

    id: AccountId
    role: Role = Role.VIEWER
    linked_identities: dict[ProviderKind, LinkedIdentity] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def linked(self, provider: ProviderKind) -> Optional[LinkedIdentity]:
        """Return the identity linked for a provider kind, if any."""
        return self.linked_identities.get(provider)

    def is_linked(self, provider: ProviderKind) -> bool:
        return provider in self.linked_identities

    def with_link(self, provider: ProviderKind, identity: LinkedIdentity) -> "Account":
        """Copy of this account with the provider link replaced."""
        return self.model_copy(
            update={
                "linked_identities": {**self.linked_identities, provider: identity},
                "updated_at": datetime.now(timezone.utc),
            }
        )

    def without_link(self, provider: ProviderKind) -> "Account":
        """Copy of this account with the provider link removed."""
        remaining = {k: v for k, v in self.linked_identities.items() if k != provider}
        return self.model_copy(
            update={
                "linked_identities": remaining,
                "updated_at": datetime.now(timezone.utc),
            }
        )

    def with_role(self, role: Role) -> "Account":
        return self.model_copy(
            update={"role": role, "updated_at": datetime.now(timezone.utc)}
        )
