"""Feature permission catalog entry."""

from typing import Optional

from stagelink.domain.model.common import DomainModel
from stagelink.domain.value import Role, has_role_at_least


class FeaturePermission(DomainModel):
    """A gated feature and the minimum role that unlocks it."""

    feature_name: str
    required_role: Role
    is_enabled: bool = True
    description: Optional[str] = None

    def grants(self, role: Role) -> bool:
        """Whether an account with ``role`` may use this feature."""
        return self.is_enabled and has_role_at_least(role, self.required_role)
