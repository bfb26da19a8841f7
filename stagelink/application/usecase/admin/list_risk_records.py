"""List risk records use case."""

from pydantic import BaseModel, Field

from stagelink.domain.model import RiskRecord
from stagelink.domain.repository import RiskRecordRepository
from stagelink.domain.service import AccessEvaluator
from stagelink.domain.value import PrimarySession

from ..base import BaseUseCase
from .authorization import require_admin


class ListRiskRecordsRequest(BaseModel):
    """Filter for the risk record listing."""

    primary_session: PrimarySession | None = None
    identity_id: str | None = None
    flagged_only: bool = False
    limit: int = Field(default=100, ge=1, le=500)


class ListRiskRecordsResponse(BaseModel):
    """Risk records, newest first."""

    records: list[RiskRecord]


class ListRiskRecordsUseCase(BaseUseCase):
    """Admin-only view of recorded VPN/proxy/Tor detections."""

    def __init__(
        self,
        access_evaluator: AccessEvaluator,
        risk_record_repository: RiskRecordRepository,
    ) -> None:
        """Initialize list risk records use case.

        Args:
            access_evaluator: Checks the caller's role
            risk_record_repository: Risk record repository
        """
        self.access_evaluator = access_evaluator
        self.risk_record_repository = risk_record_repository

    async def execute(self, request: ListRiskRecordsRequest) -> ListRiskRecordsResponse:
        """List records.

        Raises:
            NotAuthorizedError: Caller is not an admin
        """
        await require_admin(
            self.access_evaluator, request.primary_session, "view risk records"
        )

        if request.identity_id:
            records = await self.risk_record_repository.list_for_identity(
                request.identity_id
            )
            if request.flagged_only:
                records = [r for r in records if r.is_flagged]
            return ListRiskRecordsResponse(records=records[: request.limit])

        records = await self.risk_record_repository.list_recent(
            limit=request.limit, flagged_only=request.flagged_only
        )
        return ListRiskRecordsResponse(records=records)
