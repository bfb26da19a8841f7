"""Unit tests for the begin and complete authorization use cases."""

import pytest

from stagelink.application.usecase.link import (
    BeginAuthorizationUseCase,
    CompleteAuthorizationUseCase,
)
from stagelink.application.usecase.link.begin_authorization import (
    BeginAuthorizationRequest,
)
from stagelink.application.usecase.link.complete_authorization import (
    CompleteAuthorizationRequest,
)
from stagelink.domain.error import (
    AttemptExpiredError,
    AuthorizationDeniedError,
    ExchangeError,
    ExchangeFailure,
    LinkPersistFailedError,
    MissingCodeError,
    NotAuthenticatedError,
    PkceMismatchError,
    StateMismatchError,
    ValidationError,
)
from stagelink.domain.repository import AccountRepository
from stagelink.domain.service import (
    HybridIdentityResolver,
    OAuthStateGuard,
    TokenExchanger,
)
from stagelink.domain.value import (
    AccountId,
    OAuthAttempt,
    OAuthIntent,
    PrimarySession,
    ProviderKind,
)
from tests.conftest import make_profile
from tests.harness import create_env_fixture

unit_env = create_env_fixture()

CTX = "ctx-1"
REDIRECT_URI = "http://localhost:8000/oauth/kick/callback"
SIGNED_IN = PrimarySession(id="user-1")


async def store_attempt(
    env,
    state: str = "stateA",
    intent: OAuthIntent = OAuthIntent.LINK,
    provider: ProviderKind = ProviderKind.KICK,
    verifier: str | None = "v1",
) -> None:
    guard = await env.get(OAuthStateGuard)
    await guard.store_attempt(
        CTX,
        OAuthAttempt(
            provider=provider,
            state=state,
            intent=intent,
            redirect_uri=REDIRECT_URI,
            code_verifier=verifier,
        ),
    )


def callback(**overrides) -> CompleteAuthorizationRequest:
    fields = {
        "provider": ProviderKind.KICK,
        "client_context": CTX,
        "code": "abc123",
        "state": "stateA",
        "primary_session": SIGNED_IN,
    }
    fields.update(overrides)
    return CompleteAuthorizationRequest(**fields)


class TestCompleteAuthorizationLink:
    """Link flow through CompleteAuthorizationUseCase."""

    @pytest.mark.asyncio
    async def test_kick_link_scenario(self, unit_env):
        """Should link Kick user 42 (alice) to the signed-in account."""
        # Arrange
        exchanger = await unit_env.get(TokenExchanger)
        exchanger.register_code(
            ProviderKind.KICK, "abc123", make_profile(user_id="42", username="alice"), "v1"
        )
        await store_attempt(unit_env)
        use_case = await unit_env.get(CompleteAuthorizationUseCase)

        # Act
        result = await use_case.execute(callback())

        # Assert
        assert result.intent is OAuthIntent.LINK
        linked = result.account.linked(ProviderKind.KICK)
        assert linked.provider_user_id == "42"
        assert linked.username == "alice"

        repo = await unit_env.get(AccountRepository)
        stored = await repo.find_by_id(AccountId("user-1"))
        assert stored.linked(ProviderKind.KICK).username == "alice"

    @pytest.mark.asyncio
    async def test_replayed_callback_fails_without_second_exchange(self, unit_env):
        exchanger = await unit_env.get(TokenExchanger)
        exchanger.register_code(ProviderKind.KICK, "abc123", make_profile(), "v1")
        await store_attempt(unit_env)
        use_case = await unit_env.get(CompleteAuthorizationUseCase)
        await use_case.execute(callback())

        with pytest.raises(AttemptExpiredError):
            await use_case.execute(callback())

        assert len(exchanger.exchange_calls) == 1

    @pytest.mark.asyncio
    async def test_state_mismatch_does_not_exchange(self, unit_env):
        exchanger = await unit_env.get(TokenExchanger)
        await store_attempt(unit_env, state="stateB")
        use_case = await unit_env.get(CompleteAuthorizationUseCase)

        with pytest.raises(StateMismatchError):
            await use_case.execute(callback(state="stateA"))

        assert exchanger.exchange_calls == []

    @pytest.mark.asyncio
    async def test_provider_error_param_consumes_attempt(self, unit_env):
        await store_attempt(unit_env)
        use_case = await unit_env.get(CompleteAuthorizationUseCase)
        guard = await unit_env.get(OAuthStateGuard)

        with pytest.raises(AuthorizationDeniedError):
            await use_case.execute(
                callback(code=None, error="access_denied", error_description="User denied")
            )

        assert await guard.consume(CTX, ProviderKind.KICK) is None

    @pytest.mark.asyncio
    async def test_missing_code(self, unit_env):
        await store_attempt(unit_env)
        use_case = await unit_env.get(CompleteAuthorizationUseCase)

        with pytest.raises(MissingCodeError):
            await use_case.execute(callback(code=None))

    @pytest.mark.asyncio
    async def test_missing_client_context_is_expired(self, unit_env):
        use_case = await unit_env.get(CompleteAuthorizationUseCase)

        with pytest.raises(AttemptExpiredError):
            await use_case.execute(callback(client_context=None))

    @pytest.mark.asyncio
    async def test_verifier_mismatch(self, unit_env):
        exchanger = await unit_env.get(TokenExchanger)
        exchanger.register_code(ProviderKind.KICK, "abc123", make_profile(), "v1")
        await store_attempt(unit_env, verifier="v2")
        use_case = await unit_env.get(CompleteAuthorizationUseCase)

        with pytest.raises(PkceMismatchError):
            await use_case.execute(callback())

    @pytest.mark.asyncio
    async def test_rejected_code_surfaces_exchange_error(self, unit_env):
        await store_attempt(unit_env)
        use_case = await unit_env.get(CompleteAuthorizationUseCase)

        with pytest.raises(ExchangeError) as exc_info:
            await use_case.execute(callback(code="unknown"))

        assert exc_info.value.reason is ExchangeFailure.UPSTREAM_REJECTED

    @pytest.mark.asyncio
    async def test_link_without_session_after_exchange(self, unit_env):
        exchanger = await unit_env.get(TokenExchanger)
        exchanger.register_code(ProviderKind.KICK, "abc123", make_profile(), "v1")
        await store_attempt(unit_env)
        use_case = await unit_env.get(CompleteAuthorizationUseCase)

        with pytest.raises(NotAuthenticatedError):
            await use_case.execute(callback(primary_session=None))

    @pytest.mark.asyncio
    async def test_identity_linked_elsewhere_fails_to_persist(self, unit_env):
        # Arrange
        exchanger = await unit_env.get(TokenExchanger)
        exchanger.register_code(ProviderKind.KICK, "first", make_profile(), "v1")
        exchanger.register_code(ProviderKind.KICK, "second", make_profile(), "v1")
        use_case = await unit_env.get(CompleteAuthorizationUseCase)
        await store_attempt(unit_env)
        await use_case.execute(callback(code="first"))
        await store_attempt(unit_env)

        # Act / Assert
        with pytest.raises(LinkPersistFailedError):
            await use_case.execute(
                callback(code="second", primary_session=PrimarySession(id="user-2"))
            )


class TestCompleteAuthorizationSignIn:
    """Sign-in flow through CompleteAuthorizationUseCase."""

    @pytest.mark.asyncio
    async def test_sign_in_stores_secondary_record(self, unit_env):
        # Arrange
        exchanger = await unit_env.get(TokenExchanger)
        exchanger.register_code(ProviderKind.KICK, "abc123", make_profile(), "v1")
        await store_attempt(unit_env, intent=OAuthIntent.SIGN_IN)
        use_case = await unit_env.get(CompleteAuthorizationUseCase)

        # Act
        result = await use_case.execute(callback(primary_session=None))

        # Assert
        assert result.intent is OAuthIntent.SIGN_IN
        assert result.account is None
        resolver = await unit_env.get(HybridIdentityResolver)
        identity = await resolver.resolve(None, CTX)
        assert identity.id == "secondary:42"

        repo = await unit_env.get(AccountRepository)
        assert await repo.find_by_id(AccountId("user-1")) is None


class TestBeginAuthorization:
    """Tests for BeginAuthorizationUseCase."""

    @pytest.mark.asyncio
    async def test_begin_stores_attempt_for_callback(self, unit_env):
        use_case = await unit_env.get(BeginAuthorizationUseCase)

        response = await use_case.execute(
            BeginAuthorizationRequest(
                provider=ProviderKind.KICK,
                intent=OAuthIntent.LINK,
                client_context=CTX,
                primary_session=SIGNED_IN,
            )
        )

        guard = await unit_env.get(OAuthStateGuard)
        attempt = await guard.consume(CTX, ProviderKind.KICK)
        assert attempt.state == response.state
        assert attempt.code_verifier
        assert f"state={response.state}" in response.authorization_url

    @pytest.mark.asyncio
    async def test_link_requires_primary_session(self, unit_env):
        use_case = await unit_env.get(BeginAuthorizationUseCase)

        with pytest.raises(NotAuthenticatedError):
            await use_case.execute(
                BeginAuthorizationRequest(
                    provider=ProviderKind.TWITTER,
                    intent=OAuthIntent.LINK,
                    client_context=CTX,
                )
            )

    @pytest.mark.asyncio
    async def test_sign_in_only_with_kick(self, unit_env):
        use_case = await unit_env.get(BeginAuthorizationUseCase)

        with pytest.raises(ValidationError):
            await use_case.execute(
                BeginAuthorizationRequest(
                    provider=ProviderKind.DISCORD,
                    intent=OAuthIntent.SIGN_IN,
                    client_context=CTX,
                )
            )
