"""Role hierarchy for access decisions."""

from enum import Enum


class Role(str, Enum):
    """Account roles, declared from lowest to highest privilege.

    The stored value is the role name; comparisons always go through
    ``rank`` so a new role only needs to be inserted at the right position.
    """

    VIEWER = "viewer"  # unverified viewer
    VERIFIED_VIEWER = "verified_viewer"
    STREAMER = "streamer"
    USER = "user"  # standard member
    PREMIUM = "premium"
    VIP_PLUS = "vip_plus"  # elevated member
    ADMIN = "admin"

    @property
    def rank(self) -> int:
        """Ordinal position in the hierarchy (0 = lowest)."""
        return _ROLE_ORDER.index(self)

    @classmethod
    def lowest(cls) -> "Role":
        return _ROLE_ORDER[0]

    @classmethod
    def parse(cls, value: str | None) -> "Role | None":
        """Parse a stored role name, returning None for unknown values."""
        if value is None:
            return None
        try:
            return cls(value)
        except ValueError:
            return None


_ROLE_ORDER: tuple[Role, ...] = tuple(Role)

OPERATOR_PANEL_ROLE = Role.STREAMER
ADMIN_PANEL_ROLE = Role.ADMIN


def has_role_at_least(role: Role, required_role: Role) -> bool:
    """Check whether ``role`` ranks at or above ``required_role``."""
    return role.rank >= required_role.rank


def is_verified_viewer(role: Role) -> bool:
    return has_role_at_least(role, Role.VERIFIED_VIEWER)


def can_access_operator_panel(role: Role) -> bool:
    """Streaming operators and every role above them."""
    return has_role_at_least(role, OPERATOR_PANEL_ROLE)


def can_access_admin_panel(role: Role) -> bool:
    """Administrators only. Exact match, not a threshold."""
    return role is ADMIN_PANEL_ROLE
