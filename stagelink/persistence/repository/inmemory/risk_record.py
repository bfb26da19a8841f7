"""In-memory risk record repository for testing."""

from stagelink.domain.model.risk_record import (
    RiskRecord,
    SharedIp,
    group_shared_ips,
)
from stagelink.domain.repository.risk_record import RiskRecordRepository


class InMemoryRiskRecordRepository(RiskRecordRepository):
    """Append-only list of risk records."""

    def __init__(self) -> None:
        self._records: list[RiskRecord] = []

    async def append(self, record: RiskRecord) -> RiskRecord:
        self._records.append(record)
        return record

    async def list_for_identity(self, identity_id: str) -> list[RiskRecord]:
        records = [r for r in self._records if r.identity_id == identity_id]
        return sorted(records, key=lambda r: r.created_at, reverse=True)

    async def list_recent(
        self, limit: int = 100, flagged_only: bool = False
    ) -> list[RiskRecord]:
        records = [r for r in self._records if r.is_flagged or not flagged_only]
        return sorted(records, key=lambda r: r.created_at, reverse=True)[:limit]

    async def list_shared_ips(
        self, min_identities: int = 2, limit: int = 100
    ) -> list[SharedIp]:
        return group_shared_ips(self._records, min_identities)[:limit]
