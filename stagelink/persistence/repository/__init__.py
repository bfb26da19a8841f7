"""PostgreSQL repository implementations."""

from stagelink.persistence.repository.access import PostgresAccessBackend
from stagelink.persistence.repository.account import PostgresAccountRepository
from stagelink.persistence.repository.kv_store import PostgresKeyValueStore
from stagelink.persistence.repository.risk_record import PostgresRiskRecordRepository

__all__ = [
    "PostgresAccessBackend",
    "PostgresAccountRepository",
    "PostgresKeyValueStore",
    "PostgresRiskRecordRepository",
]
