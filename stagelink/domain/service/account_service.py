"""Account domain service."""

import logfire

from stagelink.domain.error import NotFoundError
from stagelink.domain.model.account import Account
from stagelink.domain.repository.account import AccountRepository
from stagelink.domain.value import AccountId, Role

from .base import Service


class AccountService(Service):
    """Domain service for account lookup, provisioning and role assignment."""

    def __init__(self, account_repository: AccountRepository, default_role: Role) -> None:
        """Initialize account service.

        Args:
            account_repository: Account repository
            default_role: Role given to newly provisioned accounts
        """
        self.account_repository = account_repository
        self.default_role = default_role

    async def get_by_id(self, account_id: AccountId) -> Account:
        """Get account by id.

        Raises:
            NotFoundError: If the account does not exist
        """
        with logfire.span("account_service.get_by_id", account_id=account_id):
            account = await self.account_repository.find_by_id(account_id)
            if not account:
                logfire.warn("Account not found", account_id=account_id)
                raise NotFoundError("Account", account_id)
            return account

    async def ensure_account(self, account_id: AccountId) -> Account:
        """Return the account for a primary subject, creating it on first use."""
        existing = await self.account_repository.find_by_id(account_id)
        if existing:
            return existing

        with logfire.span("account_service.provision", account_id=account_id):
            # create() keeps the row of a concurrent request that got there first
            account = await self.account_repository.create(
                Account(id=account_id, role=self.default_role)
            )
            logfire.info(
                "Account provisioned", account_id=account_id, role=account.role.value
            )
            return account

    async def assign_role(self, account_id: AccountId, role: Role) -> Account:
        """Assign a role to an account.

        Raises:
            NotFoundError: If the account does not exist
        """
        with logfire.span(
            "account_service.assign_role", account_id=account_id, role=role.value
        ):
            account = await self.account_repository.set_role(account_id, role)
            if account is None:
                raise NotFoundError("Account", account_id)
            logfire.info("Role assigned", account_id=account_id, role=role.value)
            return account
