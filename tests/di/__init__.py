"""Mock providers for testing."""

from .oauth import MockOAuthProvider
from .reputation import MockReputationProvider
from .persistence import SAMPLE_FEATURES, MockPersistenceProvider
from .container import build_test_container

__all__ = [
    "MockOAuthProvider",
    "MockReputationProvider",
    "MockPersistenceProvider",
    "SAMPLE_FEATURES",
    "build_test_container",
]
