"""In-memory repository implementations for testing."""

from .access import InMemoryAccessBackend
from .account import InMemoryAccountRepository
from .kv_store import InMemoryKeyValueStore
from .risk_record import InMemoryRiskRecordRepository

__all__ = [
    "InMemoryAccessBackend",
    "InMemoryAccountRepository",
    "InMemoryKeyValueStore",
    "InMemoryRiskRecordRepository",
]
