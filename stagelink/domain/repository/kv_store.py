"""Key-value store interface for client-context scoped state.

Holds pending OAuth attempts and secondary sign-in records. Keys are
namespaced by the client context that owns them.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStore(ABC):
    """String key-value store with optional expiry."""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the value for ``key``, or None if absent or expired."""
        pass

    @abstractmethod
    async def set(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        """Store ``value`` under ``key``, replacing any existing value."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove ``key`` if present."""
        pass

    @abstractmethod
    async def pop(self, key: str) -> Optional[str]:
        """Atomically remove and return the value for ``key``.

        Of several concurrent callers for the same key, at most one receives
        the value; the others receive None.
        """
        pass


def client_key(client_context: str, *parts: str) -> str:
    """Build a store key scoped to one client context."""
    return ":".join((client_context, *parts))
