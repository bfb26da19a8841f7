"""PostgreSQL authorization backend.

Roles live on the ``accounts`` row; feature grants come from the
``feature_permissions`` catalog compared against that role.
"""

import asyncio
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from stagelink.domain.repository import AccessBackend
from stagelink.domain.value import Role
from stagelink.persistence.mappers import row_to_feature_permission
from stagelink.persistence.tables import accounts_table, feature_permissions_table


class PostgresAccessBackend(AccessBackend):
    """PostgreSQL implementation of AccessBackend.

    An AsyncSession cannot run statements concurrently, so queries issued by
    concurrent feature checks are serialized on a lock.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize backend with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session
        self._lock = asyncio.Lock()

    async def get_role(self, identity_id: str) -> Optional[str]:
        stmt = select(accounts_table.c.role).where(accounts_table.c.id == identity_id)
        result = await self._execute(stmt)
        return result.scalar_one_or_none()

    async def list_feature_names(self) -> list[str]:
        stmt = select(feature_permissions_table.c.feature_name).order_by(
            feature_permissions_table.c.feature_name
        )
        result = await self._execute(stmt)
        return list(result.scalars().all())

    async def has_feature_access(self, identity_id: str, feature_name: str) -> bool:
        stmt = select(feature_permissions_table).where(
            feature_permissions_table.c.feature_name == feature_name
        )
        result = await self._execute(stmt)
        row = result.mappings().first()
        if row is None:
            return False

        role = Role.parse(await self.get_role(identity_id)) or Role.lowest()
        return row_to_feature_permission(dict(row)).grants(role)

    async def _execute(self, stmt):
        async with self._lock:
            return await self.session.execute(stmt)
