"""OAuth state guard.

Creates the anti-forgery state (and PKCE verifier) for one authorization
attempt, keeps it in the client-context store, and verifies it exactly once
on the matching callback.
"""

import hmac
import secrets
from typing import Optional

import logfire
from pydantic import ValidationError as PydanticValidationError

from stagelink.domain.error import AttemptExpiredError, StateMismatchError
from stagelink.domain.repository.kv_store import KeyValueStore, client_key
from stagelink.domain.value import OAuthAttempt, OAuthIntent, ProviderKind
from stagelink.util.pkce import generate_pkce_pair

from .base import Service


class OAuthStateGuard(Service):
    """Issues and consumes single-use OAuth attempts."""

    def __init__(self, store: KeyValueStore, ttl_seconds: int) -> None:
        """Initialize the guard.

        Args:
            store: Client-context scoped key-value store
            ttl_seconds: Maximum age of an attempt accepted on callback
        """
        self.store = store
        self.ttl_seconds = ttl_seconds

    def begin(
        self,
        provider: ProviderKind,
        intent: OAuthIntent,
        redirect_uri: str,
        pkce_required: bool,
    ) -> OAuthAttempt:
        """Create a fresh attempt with an unguessable state.

        Args:
            provider: Provider being authorized
            intent: What the callback should do with the profile
            redirect_uri: Callback URL registered with the provider
            pkce_required: Whether to generate a PKCE verifier

        Returns:
            New attempt (not yet stored)
        """
        code_verifier = generate_pkce_pair()[0] if pkce_required else None
        return OAuthAttempt(
            provider=provider,
            state=secrets.token_urlsafe(32),
            intent=intent,
            redirect_uri=redirect_uri,
            code_verifier=code_verifier,
        )

    def verify(self, returned_state: str, stored_attempt: Optional[OAuthAttempt]) -> None:
        """Check a callback's state against the stored attempt.

        Args:
            returned_state: ``state`` query parameter from the callback
            stored_attempt: Attempt consumed from the store, if any

        Raises:
            AttemptExpiredError: No stored attempt, or it is older than the TTL
            StateMismatchError: The states differ
        """
        if stored_attempt is None:
            raise AttemptExpiredError()

        if stored_attempt.is_expired(self.ttl_seconds):
            raise AttemptExpiredError("OAuth attempt is too old")

        if not hmac.compare_digest(
            returned_state.encode("utf-8"), stored_attempt.state.encode("utf-8")
        ):
            raise StateMismatchError()

    async def store_attempt(self, client_context: str, attempt: OAuthAttempt) -> None:
        """Persist an attempt for the client context that started it.

        A newer attempt for the same provider replaces any older one.
        """
        with logfire.span(
            "oauth_state_guard.store_attempt", provider=attempt.provider.value
        ):
            await self.store.set(
                self._key(client_context, attempt.provider),
                attempt.model_dump_json(),
                ttl_seconds=self.ttl_seconds,
            )

    async def consume(
        self, client_context: str, provider: ProviderKind
    ) -> Optional[OAuthAttempt]:
        """Remove and return the stored attempt for a provider.

        Called before verification so the attempt is gone whatever happens
        next. Of two racing callbacks only one receives the attempt.
        """
        raw = await self.store.pop(self._key(client_context, provider))
        if raw is None:
            logfire.warn("No pending OAuth attempt", provider=provider.value)
            return None

        try:
            return OAuthAttempt.model_validate_json(raw)
        except PydanticValidationError:
            logfire.warn("Discarding unreadable OAuth attempt", provider=provider.value)
            return None

    @staticmethod
    def _key(client_context: str, provider: ProviderKind) -> str:
        return client_key(client_context, "oauth_attempt", provider.value)
