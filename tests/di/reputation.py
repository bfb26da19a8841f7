"""Mock IP reputation providers for testing."""

from dishka import Scope, provide

from stagelink.adapter.reputation import StaticReputationLookup
from stagelink.domain.service import ReputationLookup
from stagelink.util.di.infrastructure.reputation import ReputationProvider


class MockReputationProvider(ReputationProvider):
    """Mock reputation provider returning neutral verdicts."""

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def get_reputation_lookup(self) -> ReputationLookup:
        """Provide static reputation lookup."""
        return StaticReputationLookup()
