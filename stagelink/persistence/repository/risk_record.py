"""PostgreSQL implementation of RiskRecord repository."""

from sqlalchemy import distinct, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from stagelink.domain.error import RepositoryWriteError
from stagelink.domain.model import RiskRecord, SharedIp, SharedIpUsage
from stagelink.domain.model.risk_record import rank_shared_ips
from stagelink.domain.repository import RiskRecordRepository
from stagelink.persistence.mappers import (
    risk_record_to_dict,
    row_to_risk_record,
    row_to_shared_ip_usage,
)
from stagelink.persistence.tables import risk_records_table


class PostgresRiskRecordRepository(RiskRecordRepository):
    """PostgreSQL implementation of RiskRecordRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def append(self, record: RiskRecord) -> RiskRecord:
        stmt = risk_records_table.insert().values(**risk_record_to_dict(record))
        try:
            async with self.session.begin_nested():
                await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise RepositoryWriteError(str(e)) from e
        return record

    async def list_for_identity(self, identity_id: str) -> list[RiskRecord]:
        stmt = (
            select(risk_records_table)
            .where(risk_records_table.c.identity_id == identity_id)
            .order_by(risk_records_table.c.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return [row_to_risk_record(dict(row)) for row in result.mappings().all()]

    async def list_recent(
        self, limit: int = 100, flagged_only: bool = False
    ) -> list[RiskRecord]:
        stmt = select(risk_records_table)
        if flagged_only:
            stmt = stmt.where(
                or_(
                    risk_records_table.c.is_vpn,
                    risk_records_table.c.is_proxy,
                    risk_records_table.c.is_tor,
                )
            )
        stmt = stmt.order_by(risk_records_table.c.created_at.desc()).limit(limit)
        result = await self.session.execute(stmt)
        return [row_to_risk_record(dict(row)) for row in result.mappings().all()]

    async def list_shared_ips(
        self, min_identities: int = 2, limit: int = 100
    ) -> list[SharedIp]:
        t = risk_records_table
        identity_count = func.count(distinct(t.c.identity_id))

        # Addresses seen under enough identities, busiest first
        shared = (
            select(t.c.ip_address)
            .group_by(t.c.ip_address)
            .having(identity_count >= min_identities)
            .order_by(identity_count.desc(), func.max(t.c.created_at).desc())
            .limit(limit)
        )
        stmt = (
            select(
                t.c.ip_address,
                t.c.identity_id,
                func.min(t.c.created_at).label("first_seen_at"),
                func.max(t.c.created_at).label("last_seen_at"),
                func.count().label("occurrence_count"),
            )
            .where(t.c.ip_address.in_(shared.scalar_subquery()))
            .group_by(t.c.ip_address, t.c.identity_id)
        )
        result = await self.session.execute(stmt)

        usages: dict[str, list[SharedIpUsage]] = {}
        for row in result.mappings().all():
            usages.setdefault(row["ip_address"], []).append(
                row_to_shared_ip_usage(dict(row))
            )
        return rank_shared_ips(
            [SharedIp.from_usages(ip, ip_usages) for ip, ip_usages in usages.items()]
        )
