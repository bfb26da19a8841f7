"""Administrative use cases."""

from .assign_role import AssignRoleUseCase
from .list_risk_records import ListRiskRecordsUseCase
from .list_shared_ips import ListSharedIpsUseCase

__all__ = ["AssignRoleUseCase", "ListRiskRecordsUseCase", "ListSharedIpsUseCase"]
