"""IP reputation adapter."""

from .proxycheck import ProxyCheckReputationLookup, StaticReputationLookup, parse_verdict

__all__ = ["ProxyCheckReputationLookup", "StaticReputationLookup", "parse_verdict"]
