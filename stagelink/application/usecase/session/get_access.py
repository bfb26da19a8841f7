"""Get access use case."""

from pydantic import BaseModel

from stagelink.domain.service import AccessEvaluator, HybridIdentityResolver
from stagelink.domain.value import (
    PrimarySession,
    Role,
    SessionIdentity,
    can_access_admin_panel,
    can_access_operator_panel,
    is_verified_viewer,
)

from ..base import BaseUseCase


class GetAccessRequest(BaseModel):
    """Session state carried by the request."""

    primary_session: PrimarySession | None = None
    client_context: str | None = None


class AccessSummary(BaseModel):
    """Everything the client needs to gate its UI."""

    identity: SessionIdentity | None = None
    role: Role
    features: dict[str, bool]
    is_verified_viewer: bool
    can_access_operator_panel: bool
    can_access_admin_panel: bool


class GetAccessUseCase(BaseUseCase):
    """Resolves the caller and evaluates role and feature access."""

    def __init__(
        self,
        identity_resolver: HybridIdentityResolver,
        access_evaluator: AccessEvaluator,
    ) -> None:
        """Initialize get access use case.

        Args:
            identity_resolver: Hybrid identity resolver
            access_evaluator: Role and feature evaluator
        """
        self.identity_resolver = identity_resolver
        self.access_evaluator = access_evaluator

    async def execute(self, request: GetAccessRequest) -> AccessSummary:
        """Never fails: any lookup problem shows up as denied access."""
        identity = await self.identity_resolver.resolve(
            request.primary_session, request.client_context
        )
        role = await self.access_evaluator.get_role(identity)
        features = await self.access_evaluator.get_feature_access(identity)

        return AccessSummary(
            identity=identity,
            role=role,
            features=features.grants,
            is_verified_viewer=is_verified_viewer(role),
            can_access_operator_panel=can_access_operator_panel(role),
            can_access_admin_panel=can_access_admin_panel(role),
        )
