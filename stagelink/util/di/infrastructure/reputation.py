"""IP reputation infrastructure providers."""

import httpx
from dishka import Scope, provide

from stagelink.adapter.reputation import ProxyCheckReputationLookup
from stagelink.config import RiskSettings
from stagelink.domain.service import ReputationLookup
from stagelink.util.di.base import ProviderBase


class ReputationProvider(ProviderBase):
    """Reputation component base."""

    __mock_component__ = "reputation"


class ProdReputationProvider(ReputationProvider):
    """Production reputation provider using proxycheck.io."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_reputation_lookup(
        self, risk_settings: RiskSettings, http_client: httpx.AsyncClient
    ) -> ReputationLookup:
        """Provide proxycheck.io client."""
        return ProxyCheckReputationLookup(
            risk_settings=risk_settings, http_client=http_client
        )
