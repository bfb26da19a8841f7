"""Role and feature access evaluation.

Every failure path here denies: an unreadable role becomes the lowest role,
an unreadable feature becomes ``False``.
"""

import asyncio
from typing import Optional

import logfire

from stagelink.domain.error import FeatureLookupFailedError, RoleLookupFailedError
from stagelink.domain.repository.access import AccessBackend
from stagelink.domain.value import FeatureAccessMap, Role, SessionIdentity

from .base import Service


class AccessEvaluator(Service):
    """Computes a role and a per-feature access map for an identity."""

    def __init__(self, access_backend: AccessBackend) -> None:
        """Initialize access evaluator.

        Args:
            access_backend: Authorization backend queries
        """
        self.access_backend = access_backend

    async def get_role(self, identity: Optional[SessionIdentity]) -> Role:
        """Look up the role for an identity.

        Returns the lowest role for anonymous visitors, identities without a
        role, unknown stored values and lookup failures.
        """
        if identity is None:
            return Role.lowest()

        try:
            stored = await self.access_backend.get_role(identity.id)
        except Exception as e:
            logfire.warn(
                "Role lookup failed, using lowest role",
                identity_id=identity.id,
                code=RoleLookupFailedError.code,
                error=str(e),
            )
            return Role.lowest()

        role = Role.parse(stored)
        if role is None:
            if stored is not None:
                logfire.warn(
                    "Unknown stored role, using lowest role",
                    identity_id=identity.id,
                    stored_role=stored,
                )
            return Role.lowest()
        return role

    async def get_feature_access(
        self, identity: Optional[SessionIdentity]
    ) -> FeatureAccessMap:
        """Evaluate every catalog feature for an identity.

        Checks run concurrently; the map is returned once all of them have
        settled. A failed check only denies its own feature. A failed catalog
        lookup yields an empty map, which denies everything.
        """
        if identity is None:
            return FeatureAccessMap()

        with logfire.span(
            "access_evaluator.get_feature_access", identity_id=identity.id
        ):
            try:
                feature_names = await self.access_backend.list_feature_names()
            except Exception as e:
                logfire.warn(
                    "Feature catalog lookup failed, denying all features",
                    identity_id=identity.id,
                    code=FeatureLookupFailedError.code,
                    error=str(e),
                )
                return FeatureAccessMap()

            results = await asyncio.gather(
                *(self._check_feature(identity, name) for name in feature_names)
            )
            grants = dict(zip(feature_names, results))

            logfire.info(
                "Feature access evaluated",
                identity_id=identity.id,
                granted=sorted(name for name, ok in grants.items() if ok),
            )
            return FeatureAccessMap(grants=grants)

    async def has_feature_access(
        self, identity: Optional[SessionIdentity], feature_name: str
    ) -> bool:
        """Whether an identity may use one feature."""
        access = await self.get_feature_access(identity)
        return access.allows(feature_name)

    async def _check_feature(self, identity: SessionIdentity, feature_name: str) -> bool:
        try:
            return await self.access_backend.has_feature_access(
                identity.id, feature_name
            ) is True
        except Exception as e:
            logfire.warn(
                "Feature access check failed, denying feature",
                identity_id=identity.id,
                feature=feature_name,
                code=FeatureLookupFailedError.code,
                error=str(e),
            )
            return False
