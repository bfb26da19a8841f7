"""PostgreSQL key-value store for client-context scoped state."""

from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import delete, or_, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from stagelink.domain.repository import KeyValueStore
from stagelink.persistence.tables import oauth_kv_table


def _live():
    """Rows that have no expiry or have not expired yet."""
    return or_(
        oauth_kv_table.c.expires_at.is_(None),
        oauth_kv_table.c.expires_at > datetime.now(timezone.utc),
    )


class PostgresKeyValueStore(KeyValueStore):
    """Key-value store backed by the ``oauth_kv`` table.

    ``pop`` is a single ``DELETE ... RETURNING``, so of several concurrent
    callers exactly one sees the row.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize store with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def get(self, key: str) -> Optional[str]:
        stmt = select(oauth_kv_table.c.value).where(
            oauth_kv_table.c.key == key, _live()
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def set(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        expires_at = (
            datetime.now(timezone.utc) + timedelta(seconds=ttl_seconds)
            if ttl_seconds is not None
            else None
        )
        stmt = insert(oauth_kv_table).values(
            key=key, value=value, expires_at=expires_at
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[oauth_kv_table.c.key],
            set_={"value": value, "expires_at": expires_at},
        )
        await self.session.execute(stmt)
        # Attempts must be visible to the callback request, which runs in
        # its own transaction.
        await self.session.commit()

    async def delete(self, key: str) -> None:
        await self.session.execute(
            delete(oauth_kv_table).where(oauth_kv_table.c.key == key)
        )
        await self.session.commit()

    async def pop(self, key: str) -> Optional[str]:
        stmt = (
            delete(oauth_kv_table)
            .where(oauth_kv_table.c.key == key)
            .returning(oauth_kv_table.c.value, oauth_kv_table.c.expires_at)
        )
        result = await self.session.execute(stmt)
        row = result.first()
        # The delete stands even when the callback fails afterwards
        await self.session.commit()

        if row is None:
            return None
        value, expires_at = row
        if expires_at is not None and expires_at <= datetime.now(timezone.utc):
            return None
        return value

