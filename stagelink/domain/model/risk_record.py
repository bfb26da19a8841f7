"""Risk record entity.

Append-only log of IP reputation signals, one row per tracked login.
"""

from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from pydantic import Field

from stagelink.domain.model.common import DomainModel
from stagelink.domain.value import RiskAssessment, RiskRecordId


class RiskRecord(DomainModel):
    """IP reputation snapshot taken when a session was tracked."""

    id: RiskRecordId
    identity_id: str
    ip_address: str
    user_agent: Optional[str] = None
    is_vpn: bool = False
    is_proxy: bool = False
    is_tor: bool = False
    proxy_type: Optional[str] = None
    risk_score: int = Field(default=0, ge=0, le=100)
    country_code: Optional[str] = None
    country_name: Optional[str] = None
    provider_name: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def create(
        cls,
        identity_id: str,
        ip_address: str,
        user_agent: Optional[str],
        assessment: RiskAssessment,
    ) -> "RiskRecord":
        return cls(
            id=RiskRecordId(uuid4()),
            identity_id=identity_id,
            ip_address=ip_address,
            user_agent=user_agent,
            is_vpn=assessment.is_vpn,
            is_proxy=assessment.is_proxy,
            is_tor=assessment.is_tor,
            proxy_type=assessment.proxy_type,
            risk_score=assessment.risk_score,
            country_code=assessment.country_code,
            country_name=assessment.country_name,
            provider_name=assessment.provider_name,
        )

    @property
    def is_flagged(self) -> bool:
        """Seen through a VPN, proxy or Tor exit."""
        return self.is_vpn or self.is_proxy or self.is_tor


class SharedIpUsage(DomainModel):
    """How one identity used an address seen under several identities."""

    identity_id: str
    first_seen_at: datetime
    last_seen_at: datetime
    occurrence_count: int


class SharedIp(DomainModel):
    """An address tracked for more than one identity (possible alt accounts)."""

    ip_address: str
    identities: list[SharedIpUsage]

    @classmethod
    def from_usages(cls, ip_address: str, usages: list[SharedIpUsage]) -> "SharedIp":
        return cls(
            ip_address=ip_address,
            identities=sorted(usages, key=lambda u: u.last_seen_at, reverse=True),
        )

    @property
    def identity_count(self) -> int:
        return len(self.identities)

    @property
    def last_seen_at(self) -> datetime:
        return max(usage.last_seen_at for usage in self.identities)


def rank_shared_ips(groups: list[SharedIp]) -> list[SharedIp]:
    """Busiest addresses first, then the most recently seen."""
    return sorted(
        groups, key=lambda g: (g.identity_count, g.last_seen_at), reverse=True
    )


def group_shared_ips(
    records: list[RiskRecord], min_identities: int = 2
) -> list[SharedIp]:
    """Group records by address, keeping addresses with enough identities."""
    by_ip: dict[str, dict[str, list[datetime]]] = {}
    for record in records:
        seen = by_ip.setdefault(record.ip_address, {})
        seen.setdefault(record.identity_id, []).append(record.created_at)

    groups = [
        SharedIp.from_usages(
            ip_address,
            [
                SharedIpUsage(
                    identity_id=identity_id,
                    first_seen_at=min(times),
                    last_seen_at=max(times),
                    occurrence_count=len(times),
                )
                for identity_id, times in seen.items()
            ],
        )
        for ip_address, seen in by_ip.items()
        if len(seen) >= min_identities
    ]
    return rank_shared_ips(groups)
