"""Domain layer DI providers."""

from dishka import Scope, provide

from stagelink.config import AuthSettings, Settings
from stagelink.domain.repository import (
    AccessBackend,
    AccountRepository,
    KeyValueStore,
    RiskRecordRepository,
)
from stagelink.domain.service import (
    AccessEvaluator,
    AccountService,
    HybridIdentityResolver,
    IdentityLinker,
    JWTService,
    OAuthStateGuard,
    ReputationLookup,
    RiskIntake,
)
from stagelink.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    """

    scope = Scope.REQUEST

    @provide
    def get_jwt_service(self, auth_settings: AuthSettings) -> JWTService:
        """Provide session token service."""
        return JWTService(auth_settings=auth_settings)

    @provide
    def get_oauth_state_guard(
        self, store: KeyValueStore, auth_settings: AuthSettings
    ) -> OAuthStateGuard:
        """Provide OAuth state guard."""
        return OAuthStateGuard(
            store=store, ttl_seconds=auth_settings.oauth_attempt_ttl_seconds
        )

    @provide
    def get_identity_linker(
        self, account_repository: AccountRepository
    ) -> IdentityLinker:
        """Provide identity linker."""
        return IdentityLinker(account_repository=account_repository)

    @provide
    def get_account_service(
        self, account_repository: AccountRepository, settings: Settings
    ) -> AccountService:
        """Provide account service."""
        return AccountService(
            account_repository=account_repository,
            default_role=settings.access.default_role,
        )

    @provide
    def get_identity_resolver(self, store: KeyValueStore) -> HybridIdentityResolver:
        """Provide hybrid identity resolver."""
        return HybridIdentityResolver(store=store)

    @provide
    def get_access_evaluator(self, access_backend: AccessBackend) -> AccessEvaluator:
        """Provide role and feature access evaluator."""
        return AccessEvaluator(access_backend=access_backend)

    @provide
    def get_risk_intake(
        self,
        reputation_lookup: ReputationLookup,
        risk_record_repository: RiskRecordRepository,
        settings: Settings,
    ) -> RiskIntake:
        """Provide risk intake."""
        return RiskIntake(
            reputation_lookup=reputation_lookup,
            risk_record_repository=risk_record_repository,
            enabled=settings.risk.enabled,
        )
