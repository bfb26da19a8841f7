"""Domain model entities for Stagelink."""

from stagelink.domain.model.account import Account, LinkedIdentity
from stagelink.domain.model.feature_permission import FeaturePermission
from stagelink.domain.model.risk_record import RiskRecord, SharedIp, SharedIpUsage

__all__ = [
    "Account",
    "LinkedIdentity",
    "FeaturePermission",
    "RiskRecord",
    "SharedIp",
    "SharedIpUsage",
]
