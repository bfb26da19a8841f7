"""Persistence infrastructure providers."""

from collections.abc import AsyncIterator

import logfire
from dishka import Scope, provide
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from stagelink.config import Settings
from stagelink.domain.repository import (
    AccessBackend,
    AccountRepository,
    KeyValueStore,
    RiskRecordRepository,
)
from stagelink.persistence.database import create_engine, create_session_factory
from stagelink.persistence.repository import (
    PostgresAccessBackend,
    PostgresAccountRepository,
    PostgresKeyValueStore,
    PostgresRiskRecordRepository,
)
from stagelink.util.di.base import ProviderBase
from stagelink.util.observability import instrument_sqlalchemy


class PersistenceProvider(ProviderBase):
    """Persistence component base."""

    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """Production persistence provider using PostgreSQL."""

    __is_mock__ = False

    scope = Scope.APP

    @provide(scope=Scope.APP)
    async def get_engine(self, settings: Settings) -> AsyncIterator[AsyncEngine]:
        """Provide database engine, disposed on shutdown."""
        engine = create_engine(settings)
        instrument_sqlalchemy(engine)
        yield engine
        await engine.dispose()

    @provide(scope=Scope.APP)
    def get_session_factory(
        self, engine: AsyncEngine
    ) -> async_sessionmaker[AsyncSession]:
        """Provide session factory."""
        return create_session_factory(engine)

    @provide(scope=Scope.REQUEST)
    async def get_session(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> AsyncIterator[AsyncSession]:
        """Provide database session for request scope.

        The session is committed when the request scope closes (after any
        background tasks), or rolled back if an exception was raised.
        """
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception as e:
                logfire.warn("Session rollback", error=str(e))
                await session.rollback()
                raise

    @provide(scope=Scope.REQUEST)
    def get_account_repository(self, session: AsyncSession) -> AccountRepository:
        """Provide Account repository."""
        return PostgresAccountRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_risk_record_repository(
        self, session: AsyncSession
    ) -> RiskRecordRepository:
        """Provide RiskRecord repository."""
        return PostgresRiskRecordRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_access_backend(self, session: AsyncSession) -> AccessBackend:
        """Provide authorization backend."""
        return PostgresAccessBackend(session)

    @provide(scope=Scope.REQUEST)
    def get_key_value_store(self, session: AsyncSession) -> KeyValueStore:
        """Provide client-context key-value store."""
        return PostgresKeyValueStore(session)
