"""PostgreSQL implementation of Account repository."""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from stagelink.domain.error import RepositoryWriteError
from stagelink.domain.model import Account, LinkedIdentity
from stagelink.domain.repository import AccountRepository
from stagelink.domain.value import AccountId, ProviderKind, Role
from stagelink.persistence.mappers import (
    account_to_dict,
    cleared_link_values,
    link_to_values,
    row_to_account,
)
from stagelink.persistence.tables import accounts_table, link_column


class PostgresAccountRepository(AccountRepository):
    """PostgreSQL implementation of AccountRepository.

    Every write is one statement inside a savepoint, so a rejected write
    leaves the request transaction usable.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, account_id: AccountId) -> Optional[Account]:
        stmt = select(accounts_table).where(accounts_table.c.id == account_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_account(dict(row)) if row else None

    async def find_by_linked_identity(
        self, provider: ProviderKind, provider_user_id: str
    ) -> Optional[Account]:
        column = accounts_table.c[link_column(provider, "user_id")]
        stmt = select(accounts_table).where(column == provider_user_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_account(dict(row)) if row else None

    async def create(self, account: Account) -> Account:
        stmt = (
            insert(accounts_table)
            .values(**account_to_dict(account))
            .on_conflict_do_nothing(index_elements=[accounts_table.c.id])
        )
        await self._write(stmt)

        stored = await self.find_by_id(account.id)
        if stored is None:
            raise RepositoryWriteError(f"Account {account.id} was not stored")
        return stored

    async def set_link(
        self, account_id: AccountId, provider: ProviderKind, identity: LinkedIdentity
    ) -> Optional[Account]:
        return await self._update(account_id, link_to_values(provider, identity))

    async def clear_link(
        self, account_id: AccountId, provider: ProviderKind
    ) -> Optional[Account]:
        return await self._update(account_id, cleared_link_values(provider))

    async def set_role(self, account_id: AccountId, role: Role) -> Optional[Account]:
        return await self._update(account_id, {"role": role.value})

    async def _update(
        self, account_id: AccountId, values: Dict[str, Any]
    ) -> Optional[Account]:
        stmt = (
            accounts_table.update()
            .where(accounts_table.c.id == account_id)
            .values(**values, updated_at=datetime.now(timezone.utc))
            .returning(*accounts_table.c)
        )
        result = await self._write(stmt)
        row = result.mappings().first()
        return row_to_account(dict(row)) if row else None

    async def _write(self, stmt):
        try:
            async with self.session.begin_nested():
                return await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise RepositoryWriteError(str(e)) from e
