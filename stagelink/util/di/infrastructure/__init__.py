"""Infrastructure providers."""

# Import bases
from .oauth import OAuthProvider
from .persistence import PersistenceProvider
from .reputation import ReputationProvider

# Import implementations (needed for __subclasses__())
from .oauth import ProdOAuthProvider  # noqa: F401
from .persistence import ProdPersistenceProvider  # noqa: F401
from .reputation import ProdReputationProvider  # noqa: F401

__all__ = [
    "OAuthProvider",
    "PersistenceProvider",
    "ProdOAuthProvider",
    "ProdPersistenceProvider",
    "ProdReputationProvider",
    "ReputationProvider",
]
