"""In-memory account repository for testing."""

from typing import Optional

from stagelink.domain.error import RepositoryWriteError
from stagelink.domain.model.account import Account, LinkedIdentity
from stagelink.domain.repository.account import AccountRepository
from stagelink.domain.value import AccountId, ProviderKind, Role


class InMemoryAccountRepository(AccountRepository):
    """In-memory implementation of AccountRepository for testing.

    Each write replaces the whole stored account, matching the single
    statement writes of the PostgreSQL repository. A provider identity can
    be linked to only one account, as the unique indexes enforce there.
    """

    def __init__(self) -> None:
        self._accounts: dict[AccountId, Account] = {}

    async def find_by_id(self, account_id: AccountId) -> Optional[Account]:
        return self._accounts.get(account_id)

    async def find_by_linked_identity(
        self, provider: ProviderKind, provider_user_id: str
    ) -> Optional[Account]:
        return self._owner(provider, provider_user_id)

    def _owner(
        self, provider: ProviderKind, provider_user_id: str
    ) -> Optional[Account]:
        for account in self._accounts.values():
            identity = account.linked(provider)
            if identity and identity.provider_user_id == provider_user_id:
                return account
        return None

    async def create(self, account: Account) -> Account:
        return self._accounts.setdefault(account.id, account)

    async def set_link(
        self, account_id: AccountId, provider: ProviderKind, identity: LinkedIdentity
    ) -> Optional[Account]:
        owner = self._owner(provider, identity.provider_user_id)
        if owner is not None and owner.id != account_id:
            raise RepositoryWriteError(
                f"{provider.value} identity {identity.provider_user_id} "
                "is linked to another account"
            )

        account = self._accounts.get(account_id)
        if account is None:
            return None
        updated = account.with_link(provider, identity)
        self._accounts[account_id] = updated
        return updated

    async def clear_link(
        self, account_id: AccountId, provider: ProviderKind
    ) -> Optional[Account]:
        account = self._accounts.get(account_id)
        if account is None:
            return None
        updated = account.without_link(provider)
        self._accounts[account_id] = updated
        return updated

    async def set_role(self, account_id: AccountId, role: Role) -> Optional[Account]:
        account = self._accounts.get(account_id)
        if account is None:
            return None
        updated = account.with_role(role)
        self._accounts[account_id] = updated
        return updated
