"""Account repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from stagelink.domain.model.account import Account, LinkedIdentity
from stagelink.domain.value import AccountId, ProviderKind, Role


class AccountRepository(ABC):
    """Repository for the Account aggregate.

    Link writes are single-statement updates: readers observe either the
    previous complete link or the new complete link for a provider kind.
    """

    @abstractmethod
    async def find_by_id(self, account_id: AccountId) -> Optional[Account]:
        """Find an account by its primary subject id.

        Args:
            account_id: The primary subject id

        Returns:
            The account if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_linked_identity(
        self, provider: ProviderKind, provider_user_id: str
    ) -> Optional[Account]:
        """Find the account a provider identity is linked to.

        Args:
            provider: Provider kind
            provider_user_id: The user's id on that provider

        Returns:
            The account if found, None otherwise
        """
        pass

    @abstractmethod
    async def create(self, account: Account) -> Account:
        """Insert a new account unless one already exists for its id.

        Args:
            account: The account to insert

        Returns:
            The stored account (the existing one if the id was taken)
        """
        pass

    @abstractmethod
    async def set_link(
        self, account_id: AccountId, provider: ProviderKind, identity: LinkedIdentity
    ) -> Optional[Account]:
        """Atomically write every link field for one provider kind.

        Args:
            account_id: Account to update
            provider: Provider kind being linked
            identity: Complete identity to store

        Returns:
            The updated account, or None if the account does not exist
        """
        pass

    @abstractmethod
    async def clear_link(
        self, account_id: AccountId, provider: ProviderKind
    ) -> Optional[Account]:
        """Atomically clear every link field for one provider kind.

        Args:
            account_id: Account to update
            provider: Provider kind being unlinked

        Returns:
            The updated account, or None if the account does not exist
        """
        pass

    @abstractmethod
    async def set_role(self, account_id: AccountId, role: Role) -> Optional[Account]:
        """Assign a role.

        Args:
            account_id: Account to update
            role: New role

        Returns:
            The updated account, or None if the account does not exist
        """
        pass
