"""In-memory authorization backend for testing."""

from typing import Optional

from stagelink.domain.model.feature_permission import FeaturePermission
from stagelink.domain.repository.access import AccessBackend
from stagelink.domain.repository.account import AccountRepository
from stagelink.domain.value import AccountId, Role


class InMemoryAccessBackend(AccessBackend):
    """Reads roles from an in-memory account repository.

    Identities without an account row (secondary identities, for example)
    have no role.
    """

    def __init__(
        self,
        account_repository: AccountRepository,
        features: Optional[list[FeaturePermission]] = None,
    ) -> None:
        self.account_repository = account_repository
        self._features: dict[str, FeaturePermission] = {
            f.feature_name: f for f in features or []
        }

    async def get_role(self, identity_id: str) -> Optional[str]:
        account = await self.account_repository.find_by_id(AccountId(identity_id))
        return account.role.value if account else None

    async def list_feature_names(self) -> list[str]:
        return sorted(self._features)

    async def has_feature_access(self, identity_id: str, feature_name: str) -> bool:
        feature = self._features.get(feature_name)
        if feature is None:
            return False
        role = Role.parse(await self.get_role(identity_id)) or Role.lowest()
        return feature.grants(role)
