"""Core DI providers (non-mockable)."""

from collections.abc import AsyncIterator

import httpx
from dishka import Scope, provide

from stagelink.config import AuthSettings, RiskSettings, Settings
from stagelink.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    """

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        return Settings()

    @provide(scope=Scope.APP)
    def provide_auth_settings(self, settings: Settings) -> AuthSettings:
        """Provide auth settings."""
        return settings.auth

    @provide(scope=Scope.APP)
    def provide_risk_settings(self, settings: Settings) -> RiskSettings:
        """Provide IP reputation settings."""
        return settings.risk

    @provide(scope=Scope.APP)
    async def provide_http_client(self) -> AsyncIterator[httpx.AsyncClient]:
        """Shared outbound HTTP client, closed on shutdown."""
        async with httpx.AsyncClient() as client:
            yield client
