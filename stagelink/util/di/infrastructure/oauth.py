"""OAuth provider infrastructure providers."""

import httpx
from dishka import Scope, provide

from stagelink.adapter.oauth import HttpTokenExchanger
from stagelink.config import Settings
from stagelink.domain.service import TokenExchanger
from stagelink.domain.value import ProviderKind
from stagelink.util.di.base import ProviderBase
from stagelink.util.error import ConfigurationError

_PLACEHOLDER = "CHANGE_ME_IN_PRODUCTION"


class OAuthProvider(ProviderBase):
    """OAuth component base."""

    __mock_component__ = "oauth"


class ProdOAuthProvider(OAuthProvider):
    """Production OAuth provider talking to Kick, Twitter and Discord."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_token_exchanger(
        self, settings: Settings, http_client: httpx.AsyncClient
    ) -> TokenExchanger:
        """Provide the HTTP token exchanger.

        Raises:
            ConfigurationError: Placeholder credentials in production
        """
        if settings.is_production:
            for kind in ProviderKind:
                credentials = settings.auth.provider(kind)
                if _PLACEHOLDER in (credentials.client_id, credentials.client_secret):
                    raise ConfigurationError(
                        f"{kind.display_name} OAuth credentials must be configured"
                    )

        return HttpTokenExchanger(auth_settings=settings.auth, http_client=http_client)
