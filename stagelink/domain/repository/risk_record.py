"""Risk record repository interface."""

from abc import ABC, abstractmethod

from stagelink.domain.model.risk_record import RiskRecord, SharedIp


class RiskRecordRepository(ABC):
    """Append-only store for risk records."""

    @abstractmethod
    async def append(self, record: RiskRecord) -> RiskRecord:
        """Insert a new record. Records are never updated in place."""
        pass

    @abstractmethod
    async def list_for_identity(self, identity_id: str) -> list[RiskRecord]:
        """Records for one identity, newest first."""
        pass

    @abstractmethod
    async def list_recent(
        self, limit: int = 100, flagged_only: bool = False
    ) -> list[RiskRecord]:
        """Most recent records across all identities, newest first.

        Args:
            limit: Maximum number of records
            flagged_only: Only VPN/proxy/Tor detections
        """
        pass

    @abstractmethod
    async def list_shared_ips(
        self, min_identities: int = 2, limit: int = 100
    ) -> list[SharedIp]:
        """Addresses recorded for at least ``min_identities`` distinct identities.

        Busiest addresses first, then the most recently seen. Each entry
        lists its identities with first/last seen times and record counts.

        Args:
            min_identities: Minimum number of distinct identities per address
            limit: Maximum number of addresses
        """
        pass
