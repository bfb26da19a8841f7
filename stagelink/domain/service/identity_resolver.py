"""Hybrid identity resolution.

Turns whichever session is present into one logical identity so features
never branch on how the visitor signed in.
"""

from typing import Optional

import logfire
from pydantic import ValidationError as PydanticValidationError

from stagelink.domain.repository.kv_store import KeyValueStore, client_key
from stagelink.domain.value import PrimarySession, SecondaryClientRecord, SessionIdentity

from .base import Service

SECONDARY_RECORD_KEY = "secondary_identity"


def parse_secondary_record(raw: Optional[str]) -> Optional[SecondaryClientRecord]:
    """Parse stored secondary state, treating anything unreadable as absent."""
    if not raw:
        return None
    try:
        return SecondaryClientRecord.model_validate_json(raw)
    except PydanticValidationError:
        logfire.warn("Ignoring malformed secondary session record")
        return None


def resolve_session_identity(
    primary_session: Optional[PrimarySession],
    secondary_client_state: Optional[str],
) -> Optional[SessionIdentity]:
    """Resolve the logical identity for a request.

    A primary session always wins. Otherwise an authenticated secondary
    record yields a ``secondary:``-namespaced id. Anything else resolves to
    None (unauthenticated).

    Args:
        primary_session: Verified primary session, if any
        secondary_client_state: Raw secondary record from client storage

    Returns:
        Resolved identity, or None
    """
    if primary_session is not None:
        return SessionIdentity.primary(primary_session.id)

    record = parse_secondary_record(secondary_client_state)
    if record is not None and record.authenticated:
        return SessionIdentity.secondary(record.id)

    return None


class HybridIdentityResolver(Service):
    """Reads the secondary record for a client context and resolves."""

    def __init__(self, store: KeyValueStore) -> None:
        """Initialize resolver.

        Args:
            store: Client-context scoped key-value store
        """
        self.store = store

    async def resolve(
        self,
        primary_session: Optional[PrimarySession],
        client_context: Optional[str],
    ) -> Optional[SessionIdentity]:
        """Resolve on every call; nothing is cached between requests."""
        if primary_session is not None or not client_context:
            return resolve_session_identity(primary_session, None)

        raw = await self.store.get(self.record_key(client_context))
        return resolve_session_identity(None, raw)

    async def load_secondary_record(
        self, client_context: str
    ) -> Optional[SecondaryClientRecord]:
        """Stored secondary record for a client context, if readable."""
        return parse_secondary_record(
            await self.store.get(self.record_key(client_context))
        )

    async def remember_secondary(
        self, client_context: str, record: SecondaryClientRecord
    ) -> None:
        """Store the secondary record after a successful sign-in."""
        with logfire.span(
            "identity_resolver.remember_secondary", provider=record.provider.value
        ):
            await self.store.set(
                self.record_key(client_context), record.model_dump_json()
            )

    async def forget_secondary(self, client_context: str) -> None:
        """Drop the secondary record (sign-out)."""
        await self.store.delete(self.record_key(client_context))

    @staticmethod
    def record_key(client_context: str) -> str:
        return client_key(client_context, SECONDARY_RECORD_KEY)
