"""OAuth provider adapter (Kick, Twitter, Discord)."""

from .exchanger import HttpTokenExchanger, MockTokenExchanger, classify_token_error
from .providers import ENDPOINTS, NORMALIZERS, ProviderEndpoints

__all__ = [
    "ENDPOINTS",
    "NORMALIZERS",
    "HttpTokenExchanger",
    "MockTokenExchanger",
    "ProviderEndpoints",
    "classify_token_error",
]
