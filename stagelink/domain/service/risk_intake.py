"""Risk/IP intake.

Records IP reputation signals for a tracked session. Runs off the request's
critical path; nothing here may block or fail a sign-in.
"""

from typing import Optional

import logfire

from stagelink.domain.error import RiskIntakeError
from stagelink.domain.model.risk_record import RiskRecord
from stagelink.domain.repository.risk_record import RiskRecordRepository
from stagelink.domain.value import RiskAssessment, SessionIdentity

from .base import Service


class ReputationLookup:
    """IP reputation port."""

    async def lookup(self, ip_address: str) -> RiskAssessment:
        """Assess one IP address.

        Raises:
            Exception: Any failure; callers record a neutral assessment instead
        """
        raise NotImplementedError


class RiskIntake(Service):
    """Looks up IP reputation and appends a risk record."""

    def __init__(
        self,
        reputation_lookup: ReputationLookup,
        risk_record_repository: RiskRecordRepository,
        enabled: bool = True,
    ) -> None:
        """Initialize risk intake.

        Args:
            reputation_lookup: IP reputation service
            risk_record_repository: Risk record repository
            enabled: When False, records are written without a lookup
        """
        self.reputation_lookup = reputation_lookup
        self.risk_record_repository = risk_record_repository
        self.enabled = enabled

    async def track(
        self,
        identity: SessionIdentity,
        client_ip: str,
        user_agent: Optional[str],
    ) -> RiskRecord:
        """Append one risk record for a session.

        Args:
            identity: Resolved identity the session belongs to
            client_ip: Client address as seen by the API
            user_agent: Client user agent, if sent

        Returns:
            The stored record

        Raises:
            RiskIntakeError: The record could not be written
        """
        with logfire.span(
            "risk_intake.track", identity_id=identity.id, ip_address=client_ip
        ):
            assessment = await self._assess(client_ip)
            record = RiskRecord.create(
                identity_id=identity.id,
                ip_address=client_ip,
                user_agent=user_agent,
                assessment=assessment,
            )

            try:
                stored = await self.risk_record_repository.append(record)
            except Exception as e:
                logfire.error(
                    "Risk record write failed",
                    identity_id=identity.id,
                    error=str(e),
                )
                raise RiskIntakeError(f"Could not store risk record: {e}") from e

            if stored.is_flagged:
                logfire.warn(
                    "Flagged connection recorded",
                    identity_id=identity.id,
                    is_vpn=stored.is_vpn,
                    is_proxy=stored.is_proxy,
                    is_tor=stored.is_tor,
                    risk_score=stored.risk_score,
                )
            return stored

    async def _assess(self, client_ip: str) -> RiskAssessment:
        if not self.enabled:
            return RiskAssessment.neutral()
        try:
            return await self.reputation_lookup.lookup(client_ip)
        except Exception as e:
            logfire.warn(
                "Reputation lookup failed, recording neutral assessment",
                ip_address=client_ip,
                error=str(e),
            )
            return RiskAssessment.neutral()
