"""List shared IPs use case (possible alt accounts)."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from stagelink.domain.model import SharedIp
from stagelink.domain.repository import AccountRepository, RiskRecordRepository
from stagelink.domain.service import AccessEvaluator
from stagelink.domain.value import AccountId, PrimarySession, ProviderKind, Role

from ..base import BaseUseCase
from .authorization import require_admin

RiskLevel = Literal["low", "medium", "high"]


def risk_level(identity_count: int) -> RiskLevel:
    """Five or more identities on one address is high, three or more medium."""
    if identity_count >= 5:
        return "high"
    if identity_count >= 3:
        return "medium"
    return "low"


class ListSharedIpsRequest(BaseModel):
    primary_session: PrimarySession | None = None
    min_identities: int = Field(default=2, ge=2)
    limit: int = Field(default=100, ge=1, le=500)


class SharedIpIdentityView(BaseModel):
    """One identity seen on a shared address."""

    identity_id: str
    # None for secondary identities and unprovisioned ids
    kick_username: str | None = None
    role: Role | None = None
    first_seen_at: datetime
    last_seen_at: datetime
    occurrence_count: int


class SharedIpView(BaseModel):
    ip_address: str
    identity_count: int
    risk_level: RiskLevel
    identities: list[SharedIpIdentityView]


class ListSharedIpsResponse(BaseModel):
    shared_ips: list[SharedIpView]


class ListSharedIpsUseCase(BaseUseCase):
    """Admin-only view of addresses tracked for more than one identity."""

    def __init__(
        self,
        access_evaluator: AccessEvaluator,
        risk_record_repository: RiskRecordRepository,
        account_repository: AccountRepository,
    ) -> None:
        self.access_evaluator = access_evaluator
        self.risk_record_repository = risk_record_repository
        self.account_repository = account_repository

    async def execute(self, request: ListSharedIpsRequest) -> ListSharedIpsResponse:
        """List shared addresses, busiest first.

        Raises:
            NotAuthorizedError: Caller is not an admin
        """
        await require_admin(
            self.access_evaluator, request.primary_session, "view shared IPs"
        )

        shared = await self.risk_record_repository.list_shared_ips(
            min_identities=request.min_identities, limit=request.limit
        )
        return ListSharedIpsResponse(
            shared_ips=[await self._view(group) for group in shared]
        )

    async def _view(self, group: SharedIp) -> SharedIpView:
        identities = []
        for usage in group.identities:
            account = await self.account_repository.find_by_id(
                AccountId(usage.identity_id)
            )
            kick = account.linked(ProviderKind.KICK) if account else None
            identities.append(
                SharedIpIdentityView(
                    identity_id=usage.identity_id,
                    kick_username=kick.username if kick else None,
                    role=account.role if account else None,
                    first_seen_at=usage.first_seen_at,
                    last_seen_at=usage.last_seen_at,
                    occurrence_count=usage.occurrence_count,
                )
            )
        return SharedIpView(
            ip_address=group.ip_address,
            identity_count=group.identity_count,
            risk_level=risk_level(group.identity_count),
            identities=identities,
        )
