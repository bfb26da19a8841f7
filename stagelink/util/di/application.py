"""Application layer DI providers."""

from dishka import Scope, provide

from stagelink.application.usecase.account import GetAccountUseCase
from stagelink.application.usecase.admin import (
    AssignRoleUseCase,
    ListRiskRecordsUseCase,
    ListSharedIpsUseCase,
)
from stagelink.application.usecase.link import (
    BeginAuthorizationUseCase,
    CompleteAuthorizationUseCase,
    UnlinkUseCase,
)
from stagelink.application.usecase.session import (
    GetAccessUseCase,
    ResolveSessionUseCase,
    SignOutUseCase,
    TrackLoginUseCase,
)
from stagelink.config import AuthSettings
from stagelink.domain.repository import AccountRepository, RiskRecordRepository
from stagelink.domain.service import (
    AccessEvaluator,
    AccountService,
    HybridIdentityResolver,
    IdentityLinker,
    OAuthStateGuard,
    RiskIntake,
    TokenExchanger,
)
from stagelink.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    scope = Scope.REQUEST

    # Link use cases
    @provide
    def get_begin_authorization_use_case(
        self,
        state_guard: OAuthStateGuard,
        token_exchanger: TokenExchanger,
        auth_settings: AuthSettings,
    ) -> BeginAuthorizationUseCase:
        """Provide begin authorization use case."""
        return BeginAuthorizationUseCase(
            state_guard=state_guard,
            token_exchanger=token_exchanger,
            auth_settings=auth_settings,
        )

    @provide
    def get_complete_authorization_use_case(
        self,
        state_guard: OAuthStateGuard,
        token_exchanger: TokenExchanger,
        identity_linker: IdentityLinker,
        identity_resolver: HybridIdentityResolver,
        account_service: AccountService,
    ) -> CompleteAuthorizationUseCase:
        """Provide complete authorization use case."""
        return CompleteAuthorizationUseCase(
            state_guard=state_guard,
            token_exchanger=token_exchanger,
            identity_linker=identity_linker,
            identity_resolver=identity_resolver,
            account_service=account_service,
        )

    @provide
    def get_unlink_use_case(self, identity_linker: IdentityLinker) -> UnlinkUseCase:
        """Provide unlink use case."""
        return UnlinkUseCase(identity_linker=identity_linker)

    # Account use cases
    @provide
    def get_get_account_use_case(
        self, account_service: AccountService
    ) -> GetAccountUseCase:
        """Provide get account use case."""
        return GetAccountUseCase(account_service=account_service)

    # Session use cases
    @provide
    def get_resolve_session_use_case(
        self,
        identity_resolver: HybridIdentityResolver,
        account_service: AccountService,
    ) -> ResolveSessionUseCase:
        """Provide resolve session use case."""
        return ResolveSessionUseCase(
            identity_resolver=identity_resolver, account_service=account_service
        )

    @provide
    def get_get_access_use_case(
        self,
        identity_resolver: HybridIdentityResolver,
        access_evaluator: AccessEvaluator,
    ) -> GetAccessUseCase:
        """Provide get access use case."""
        return GetAccessUseCase(
            identity_resolver=identity_resolver, access_evaluator=access_evaluator
        )

    @provide
    def get_track_login_use_case(self, risk_intake: RiskIntake) -> TrackLoginUseCase:
        """Provide track login use case."""
        return TrackLoginUseCase(risk_intake=risk_intake)

    @provide
    def get_sign_out_use_case(
        self, identity_resolver: HybridIdentityResolver
    ) -> SignOutUseCase:
        """Provide sign out use case."""
        return SignOutUseCase(identity_resolver=identity_resolver)

    # Admin use cases
    @provide
    def get_assign_role_use_case(
        self, access_evaluator: AccessEvaluator, account_service: AccountService
    ) -> AssignRoleUseCase:
        """Provide assign role use case."""
        return AssignRoleUseCase(
            access_evaluator=access_evaluator, account_service=account_service
        )

    @provide
    def get_list_risk_records_use_case(
        self,
        access_evaluator: AccessEvaluator,
        risk_record_repository: RiskRecordRepository,
    ) -> ListRiskRecordsUseCase:
        """Provide list risk records use case."""
        return ListRiskRecordsUseCase(
            access_evaluator=access_evaluator,
            risk_record_repository=risk_record_repository,
        )

    @provide
    def get_list_shared_ips_use_case(
        self,
        access_evaluator: AccessEvaluator,
        risk_record_repository: RiskRecordRepository,
        account_repository: AccountRepository,
    ) -> ListSharedIpsUseCase:
        """Provide list shared IPs use case."""
        return ListSharedIpsUseCase(
            access_evaluator=access_evaluator,
            risk_record_repository=risk_record_repository,
            account_repository=account_repository,
        )
