"""Account response models shared by account use cases."""

from datetime import datetime

from pydantic import BaseModel

from stagelink.domain.model import Account
from stagelink.domain.value import ProviderKind, Role


class LinkedIdentityView(BaseModel):
    """One linked provider identity."""

    provider: ProviderKind
    provider_user_id: str
    username: str
    display_name: str | None = None
    avatar_url: str | None = None
    linked_at: datetime


class AccountView(BaseModel):
    """Account with its role and linked identities."""

    account_id: str
    role: Role
    linked: dict[ProviderKind, LinkedIdentityView]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_account(cls, account: Account) -> "AccountView":
        return cls(
            account_id=account.id,
            role=account.role,
            linked={
                provider: LinkedIdentityView(
                    provider=provider,
                    provider_user_id=identity.provider_user_id,
                    username=identity.username,
                    display_name=identity.display_name,
                    avatar_url=identity.avatar_url,
                    linked_at=identity.linked_at,
                )
                for provider, identity in account.linked_identities.items()
            },
            created_at=account.created_at,
            updated_at=account.updated_at,
        )
