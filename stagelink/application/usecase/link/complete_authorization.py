"""Complete authorization use case (OAuth callback)."""

import logfire
from pydantic import BaseModel

from stagelink.domain.error import AuthorizationDeniedError, MissingCodeError
from stagelink.domain.model import Account
from stagelink.domain.service import (
    AccountService,
    HybridIdentityResolver,
    IdentityLinker,
    OAuthStateGuard,
    TokenExchanger,
)
from stagelink.domain.value import (
    AccountId,
    ExternalProfile,
    OAuthIntent,
    PrimarySession,
    ProviderKind,
    SecondaryClientRecord,
)

from ..base import BaseUseCase


class CompleteAuthorizationRequest(BaseModel):
    """Callback parameters plus the caller's session state.

    These parameters come from the provider in the callback URL.
    """

    provider: ProviderKind
    client_context: str | None = None
    code: str | None = None
    state: str | None = None
    error: str | None = None
    error_description: str | None = None
    primary_session: PrimarySession | None = None


class CompleteAuthorizationResponse(BaseModel):
    """Outcome of a completed flow."""

    provider: ProviderKind
    intent: OAuthIntent
    profile: ExternalProfile
    account: Account | None = None  # set for link flows


class CompleteAuthorizationUseCase(BaseUseCase):
    """Runs the callback half of every provider's OAuth flow."""

    def __init__(
        self,
        state_guard: OAuthStateGuard,
        token_exchanger: TokenExchanger,
        identity_linker: IdentityLinker,
        identity_resolver: HybridIdentityResolver,
        account_service: AccountService,
    ) -> None:
        """Initialize complete authorization use case.

        Args:
            state_guard: OAuth state guard
            token_exchanger: Provider token exchanger
            identity_linker: Writes the link for link flows
            identity_resolver: Stores the secondary record for sign-in flows
            account_service: Provisions the account before linking
        """
        self.state_guard = state_guard
        self.token_exchanger = token_exchanger
        self.identity_linker = identity_linker
        self.identity_resolver = identity_resolver
        self.account_service = account_service

    async def execute(
        self, request: CompleteAuthorizationRequest
    ) -> CompleteAuthorizationResponse:
        """Verify, exchange, then link or sign in.

        Steps:
        1. Consume the stored attempt (it is gone whatever happens next)
        2. Fail on a provider ``error`` parameter
        3. Verify the returned state against the attempt
        4. Exchange the code for a token and profile
        5. Link the profile, or store the secondary sign-in record

        Raises:
            AuthorizationDeniedError: Provider redirected back with an error
            AttemptExpiredError: No pending attempt, or it is too old
            StateMismatchError: Returned state does not match
            MissingCodeError: No code in the callback
            PkceMismatchError: Verifier missing or rejected
            ExchangeError: Provider rejected the code or profile request
            NotAuthenticatedError: Link flow without a primary session
            LinkPersistFailedError: The link write was rejected
        """
        provider = request.provider

        with logfire.span("complete_authorization", provider=provider.value):
            attempt = None
            if request.client_context:
                attempt = await self.state_guard.consume(
                    request.client_context, provider
                )

            if request.error:
                raise AuthorizationDeniedError(
                    provider.display_name, request.error, request.error_description
                )

            self.state_guard.verify(request.state or "", attempt)

            if not request.code:
                raise MissingCodeError()

            result = await self.token_exchanger.exchange(
                provider, request.code, attempt.code_verifier, attempt.redirect_uri
            )

            if attempt.intent is OAuthIntent.SIGN_IN:
                await self._sign_in(request.client_context, result.profile)
                return CompleteAuthorizationResponse(
                    provider=provider, intent=attempt.intent, profile=result.profile
                )

            account = await self._link(request.primary_session, result.profile)
            return CompleteAuthorizationResponse(
                provider=provider,
                intent=attempt.intent,
                profile=result.profile,
                account=account,
            )

    async def _link(
        self, primary_session: PrimarySession | None, profile: ExternalProfile
    ) -> Account:
        account_id = AccountId(primary_session.id) if primary_session else None
        if account_id is not None:
            await self.account_service.ensure_account(account_id)
        return await self.identity_linker.link(account_id, profile.provider, profile)

    async def _sign_in(self, client_context: str, profile: ExternalProfile) -> None:
        record = SecondaryClientRecord(
            provider=profile.provider,
            id=profile.id,
            username=profile.username,
            display_name=profile.display_name,
            avatar_url=profile.avatar_url,
            authenticated=True,
        )
        await self.identity_resolver.remember_secondary(client_context, record)
        logfire.info(
            "Secondary sign-in completed",
            provider=profile.provider.value,
            provider_user_id=profile.id,
        )
