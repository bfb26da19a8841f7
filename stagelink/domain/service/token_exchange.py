"""Provider token exchange port."""

from typing import Optional

from stagelink.domain.value import ExchangeResult, ProviderKind


class TokenExchanger:
    """Generic OAuth code exchange interface for all providers.

    Implementations hold provider endpoints and client secrets; nothing they
    return is persisted by them.
    """

    def requires_pkce(self, provider: ProviderKind) -> bool:
        """Whether the provider's flow must carry a PKCE verifier."""
        raise NotImplementedError

    def authorization_url(
        self,
        provider: ProviderKind,
        state: str,
        redirect_uri: str,
        code_verifier: Optional[str] = None,
    ) -> str:
        """Build the provider authorization URL for one attempt.

        Args:
            provider: Provider to authorize against
            state: Anti-forgery state for this attempt
            redirect_uri: Callback URL registered with the provider
            code_verifier: PKCE verifier whose challenge goes in the URL

        Returns:
            URL to redirect the browser to
        """
        raise NotImplementedError

    async def exchange(
        self,
        provider: ProviderKind,
        authorization_code: str,
        pkce_verifier: Optional[str],
        redirect_uri: str,
    ) -> ExchangeResult:
        """Exchange an authorization code for a token and normalized profile.

        Args:
            provider: Provider that issued the code
            authorization_code: Single-use code from the callback
            pkce_verifier: Verifier matching the challenge sent at authorization
            redirect_uri: Same redirect URI used at authorization

        Returns:
            Access token and normalized profile

        Raises:
            PkceMismatchError: Verifier missing or rejected
            ExchangeError: Provider rejected the code or profile request
        """
        raise NotImplementedError
