"""Track login use case (risk intake)."""

from typing import Optional

import logfire
from pydantic import BaseModel

from stagelink.domain.error import RiskIntakeError
from stagelink.domain.model import RiskRecord
from stagelink.domain.service import RiskIntake
from stagelink.domain.value import SessionIdentity

from ..base import BaseUseCase


class TrackLoginRequest(BaseModel):
    """Connection details of an established session."""

    identity: SessionIdentity
    client_ip: str
    user_agent: str | None = None


class TrackLoginUseCase(BaseUseCase):
    """Records IP reputation for a session. Never raises."""

    def __init__(self, risk_intake: RiskIntake) -> None:
        """Initialize track login use case.

        Args:
            risk_intake: Risk intake service
        """
        self.risk_intake = risk_intake

    async def execute(self, request: TrackLoginRequest) -> Optional[RiskRecord]:
        """Append a risk record, or log and return None if that fails."""
        try:
            return await self.risk_intake.track(
                request.identity, request.client_ip, request.user_agent
            )
        except RiskIntakeError as e:
            logfire.error(
                "Risk intake failed",
                identity_id=request.identity.id,
                code=e.code,
                error=str(e),
            )
            return None
