"""In-memory key-value store for testing and local development."""

import asyncio
import time
from typing import Optional

from stagelink.domain.repository.kv_store import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    """Dict-backed store with monotonic-clock expiry."""

    def __init__(self) -> None:
        self._values: dict[str, tuple[str, Optional[float]]] = {}
        self._lock = asyncio.Lock()

    def _live_value(self, key: str) -> Optional[str]:
        entry = self._values.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and expires_at <= time.monotonic():
            del self._values[key]
            return None
        return value

    async def get(self, key: str) -> Optional[str]:
        async with self._lock:
            return self._live_value(key)

    async def set(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        expires_at = time.monotonic() + ttl_seconds if ttl_seconds is not None else None
        async with self._lock:
            self._values[key] = (value, expires_at)

    async def delete(self, key: str) -> None:
        async with self._lock:
            self._values.pop(key, None)

    async def pop(self, key: str) -> Optional[str]:
        async with self._lock:
            value = self._live_value(key)
            self._values.pop(key, None)
            return value
