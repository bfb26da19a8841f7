"""Repository interfaces for the Stagelink domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence layer.
"""

from stagelink.domain.repository.access import AccessBackend
from stagelink.domain.repository.account import AccountRepository
from stagelink.domain.repository.kv_store import KeyValueStore
from stagelink.domain.repository.risk_record import RiskRecordRepository

__all__ = [
    "AccessBackend",
    "AccountRepository",
    "KeyValueStore",
    "RiskRecordRepository",
]
