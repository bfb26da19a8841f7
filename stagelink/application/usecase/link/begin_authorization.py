"""Begin authorization use case."""

import logfire
from pydantic import BaseModel

from stagelink.config import AuthSettings
from stagelink.domain.error import NotAuthenticatedError, ValidationError
from stagelink.domain.service import OAuthStateGuard, TokenExchanger
from stagelink.domain.value import OAuthIntent, PrimarySession, ProviderKind

from ..base import BaseUseCase

# Providers that can establish a secondary session on their own
SIGN_IN_PROVIDERS = frozenset({ProviderKind.KICK})


class BeginAuthorizationRequest(BaseModel):
    """Start an OAuth flow for one provider."""

    provider: ProviderKind
    intent: OAuthIntent
    client_context: str
    primary_session: PrimarySession | None = None


class BeginAuthorizationResponse(BaseModel):
    """Where to send the browser."""

    authorization_url: str
    state: str


class BeginAuthorizationUseCase(BaseUseCase):
    """Creates and stores an OAuth attempt and builds the provider URL."""

    def __init__(
        self,
        state_guard: OAuthStateGuard,
        token_exchanger: TokenExchanger,
        auth_settings: AuthSettings,
    ) -> None:
        """Initialize begin authorization use case.

        Args:
            state_guard: OAuth state guard
            token_exchanger: Provider token exchanger (builds the URL)
            auth_settings: Callback URLs per provider
        """
        self.state_guard = state_guard
        self.token_exchanger = token_exchanger
        self.auth_settings = auth_settings

    async def execute(
        self, request: BeginAuthorizationRequest
    ) -> BeginAuthorizationResponse:
        """Start the flow.

        A newer attempt for the same provider and client context replaces
        any pending one.

        Raises:
            NotAuthenticatedError: Linking without a primary session
            ValidationError: Sign-in requested for a provider that cannot sign in
        """
        provider = request.provider

        if request.intent is OAuthIntent.LINK and request.primary_session is None:
            raise NotAuthenticatedError(
                f"Sign in before linking a {provider.display_name} account"
            )
        if request.intent is OAuthIntent.SIGN_IN and provider not in SIGN_IN_PROVIDERS:
            raise ValidationError(f"Sign-in with {provider.display_name} is not supported")

        with logfire.span(
            "begin_authorization", provider=provider.value, intent=request.intent.value
        ):
            redirect_uri = self.auth_settings.callback_url(provider)
            attempt = self.state_guard.begin(
                provider,
                request.intent,
                redirect_uri,
                pkce_required=self.token_exchanger.requires_pkce(provider),
            )
            await self.state_guard.store_attempt(request.client_context, attempt)

            url = self.token_exchanger.authorization_url(
                provider, attempt.state, redirect_uri, attempt.code_verifier
            )
            return BeginAuthorizationResponse(authorization_url=url, state=attempt.state)
