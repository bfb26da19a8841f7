"""Resolve session use case."""

from pydantic import BaseModel

from stagelink.domain.service import AccountService, HybridIdentityResolver
from stagelink.domain.value import (
    AccountId,
    PrimarySession,
    SecondaryClientRecord,
    SessionIdentity,
)

from ..base import BaseUseCase


class ResolveSessionRequest(BaseModel):
    """Session state carried by the request."""

    primary_session: PrimarySession | None = None
    client_context: str | None = None


class ResolveSessionResponse(BaseModel):
    """Resolved identity, or ``authenticated=False``."""

    authenticated: bool
    identity: SessionIdentity | None = None
    secondary: SecondaryClientRecord | None = None


class ResolveSessionUseCase(BaseUseCase):
    """Use case for resolving the caller's logical identity."""

    def __init__(
        self,
        identity_resolver: HybridIdentityResolver,
        account_service: AccountService,
    ) -> None:
        """Initialize resolve session use case.

        Args:
            identity_resolver: Hybrid identity resolver
            account_service: Provisions accounts for primary sessions
        """
        self.identity_resolver = identity_resolver
        self.account_service = account_service

    async def execute(self, request: ResolveSessionRequest) -> ResolveSessionResponse:
        identity = await self.identity_resolver.resolve(
            request.primary_session, request.client_context
        )
        if identity is None:
            return ResolveSessionResponse(authenticated=False)

        if identity.is_primary:
            await self.account_service.ensure_account(AccountId(identity.id))
            return ResolveSessionResponse(authenticated=True, identity=identity)

        secondary = await self.identity_resolver.load_secondary_record(
            request.client_context
        )
        return ResolveSessionResponse(
            authenticated=True, identity=identity, secondary=secondary
        )
