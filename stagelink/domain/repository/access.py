"""Authorization backend interface.

These are black-box queries: each returns a value or raises. Callers in the
domain decide what a failure means (always a denial).
"""

from abc import ABC, abstractmethod
from typing import Optional


class AccessBackend(ABC):
    """Role and feature lookups keyed by a resolved identity id."""

    @abstractmethod
    async def get_role(self, identity_id: str) -> Optional[str]:
        """Stored role name for an identity, or None if it has none."""
        pass

    @abstractmethod
    async def list_feature_names(self) -> list[str]:
        """Every feature name in the catalog."""
        pass

    @abstractmethod
    async def has_feature_access(self, identity_id: str, feature_name: str) -> bool:
        """Whether an identity may use one feature."""
        pass
