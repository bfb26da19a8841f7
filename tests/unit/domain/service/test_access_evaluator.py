"""Unit tests for AccessEvaluator."""

from typing import Optional

import pytest

from stagelink.domain.model import Account, FeaturePermission
from stagelink.domain.repository import AccessBackend
from stagelink.domain.service import AccessEvaluator
from stagelink.domain.value import AccountId, Role, SessionIdentity
from stagelink.persistence.repository.inmemory import (
    InMemoryAccessBackend,
    InMemoryAccountRepository,
)
from tests.di import SAMPLE_FEATURES


class FailingAccessBackend(AccessBackend):
    """Backend whose lookups fail on demand."""

    def __init__(
        self,
        role: Optional[str] = "streamer",
        fail_role: bool = False,
        fail_catalog: bool = False,
        failing_features: frozenset[str] = frozenset(),
        grants: Optional[dict[str, bool]] = None,
    ) -> None:
        self.role = role
        self.fail_role = fail_role
        self.fail_catalog = fail_catalog
        self.failing_features = failing_features
        self.grants = grants or {}

    async def get_role(self, identity_id: str) -> Optional[str]:
        if self.fail_role:
            raise ConnectionError("backend unavailable")
        return self.role

    async def list_feature_names(self) -> list[str]:
        if self.fail_catalog:
            raise ConnectionError("backend unavailable")
        return list(self.grants)

    async def has_feature_access(self, identity_id: str, feature_name: str) -> bool:
        if feature_name in self.failing_features:
            raise TimeoutError(f"{feature_name} check timed out")
        return self.grants[feature_name]


async def evaluator_with_account(role: Role) -> AccessEvaluator:
    repo = InMemoryAccountRepository()
    await repo.create(Account(id=AccountId("user-1"), role=role))
    return AccessEvaluator(InMemoryAccessBackend(repo, features=SAMPLE_FEATURES))


USER_1 = SessionIdentity.primary("user-1")


class TestGetRole:
    """Tests for AccessEvaluator.get_role()."""

    @pytest.mark.asyncio
    async def test_stored_role_returned(self):
        evaluator = await evaluator_with_account(Role.VIP_PLUS)

        assert await evaluator.get_role(USER_1) is Role.VIP_PLUS

    @pytest.mark.asyncio
    async def test_anonymous_gets_lowest_role(self):
        evaluator = await evaluator_with_account(Role.ADMIN)

        assert await evaluator.get_role(None) is Role.VIEWER

    @pytest.mark.asyncio
    async def test_identity_without_role_gets_lowest_role(self):
        evaluator = await evaluator_with_account(Role.ADMIN)

        role = await evaluator.get_role(SessionIdentity.secondary("42"))

        assert role is Role.VIEWER

    @pytest.mark.asyncio
    async def test_lookup_failure_falls_back_to_lowest_role(self):
        evaluator = AccessEvaluator(FailingAccessBackend(fail_role=True))

        assert await evaluator.get_role(USER_1) is Role.VIEWER

    @pytest.mark.asyncio
    async def test_unknown_stored_role_falls_back_to_lowest_role(self):
        evaluator = AccessEvaluator(FailingAccessBackend(role="moderator"))

        assert await evaluator.get_role(USER_1) is Role.VIEWER


class TestGetFeatureAccess:
    """Tests for AccessEvaluator.get_feature_access()."""

    @pytest.mark.asyncio
    async def test_grants_follow_role_threshold(self):
        evaluator = await evaluator_with_account(Role.STREAMER)

        access = await evaluator.get_feature_access(USER_1)

        assert access.grants == {
            "admin_tickets": False,
            "bonus_hunt": True,
            "giveaways": True,
            "slot_calls": True,
        }

    @pytest.mark.asyncio
    async def test_anonymous_has_no_features(self):
        evaluator = await evaluator_with_account(Role.ADMIN)

        access = await evaluator.get_feature_access(None)

        assert access.grants == {}
        assert not access.allows("slot_calls")

    @pytest.mark.asyncio
    async def test_one_failing_check_only_denies_that_feature(self):
        """Should deny a feature whose check times out and keep the rest."""
        # Arrange
        backend = FailingAccessBackend(
            grants={"giveaways": True, "bonus_hunt": True, "slot_calls": True},
            failing_features=frozenset({"bonus_hunt"}),
        )
        evaluator = AccessEvaluator(backend)

        # Act
        access = await evaluator.get_feature_access(USER_1)

        # Assert
        assert access.grants == {
            "giveaways": True,
            "bonus_hunt": False,
            "slot_calls": True,
        }

    @pytest.mark.asyncio
    async def test_catalog_failure_denies_everything(self):
        evaluator = AccessEvaluator(
            FailingAccessBackend(grants={"giveaways": True}, fail_catalog=True)
        )

        access = await evaluator.get_feature_access(USER_1)

        assert access.grants == {}
        assert not await evaluator.has_feature_access(USER_1, "giveaways")

    @pytest.mark.asyncio
    async def test_disabled_feature_denied_even_for_admin(self):
        repo = InMemoryAccountRepository()
        await repo.create(Account(id=AccountId("user-1"), role=Role.ADMIN))
        backend = InMemoryAccessBackend(
            repo,
            features=[
                FeaturePermission(
                    feature_name="giveaways",
                    required_role=Role.STREAMER,
                    is_enabled=False,
                )
            ],
        )

        assert not await AccessEvaluator(backend).has_feature_access(USER_1, "giveaways")
