"""Unit tests for the role hierarchy."""

from stagelink.domain.value import (
    Role,
    can_access_admin_panel,
    can_access_operator_panel,
    has_role_at_least,
    is_verified_viewer,
)


class TestRoleHierarchy:
    """Tests for role ordering and comparisons."""

    def test_roles_ordered_lowest_to_highest(self):
        """Should rank roles in declaration order."""
        ranks = [role.rank for role in Role]
        assert ranks == sorted(ranks)
        assert Role.VIEWER.rank == 0
        assert Role.ADMIN.rank == len(Role) - 1

    def test_lowest_role_is_viewer(self):
        assert Role.lowest() is Role.VIEWER

    def test_every_role_satisfies_itself(self):
        for role in Role:
            assert has_role_at_least(role, role)

    def test_higher_role_satisfies_lower_requirement(self):
        assert has_role_at_least(Role.VIP_PLUS, Role.STREAMER)
        assert not has_role_at_least(Role.VERIFIED_VIEWER, Role.STREAMER)

    def test_parse_unknown_role_returns_none(self):
        assert Role.parse("moderator") is None
        assert Role.parse(None) is None
        assert Role.parse("premium") is Role.PREMIUM


class TestPanelAccess:
    """Tests for the derived access flags."""

    def test_verified_viewer_threshold(self):
        assert not is_verified_viewer(Role.VIEWER)
        assert is_verified_viewer(Role.VERIFIED_VIEWER)
        assert is_verified_viewer(Role.ADMIN)

    def test_operator_panel_from_streamer_up(self):
        assert not can_access_operator_panel(Role.VERIFIED_VIEWER)
        assert can_access_operator_panel(Role.STREAMER)
        assert can_access_operator_panel(Role.VIP_PLUS)
        assert can_access_operator_panel(Role.ADMIN)

    def test_admin_panel_requires_exact_admin(self):
        """Should grant the admin panel to admins only."""
        assert can_access_admin_panel(Role.ADMIN)
        for role in Role:
            if role is not Role.ADMIN:
                assert not can_access_admin_panel(role)
