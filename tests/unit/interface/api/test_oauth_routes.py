"""Route tests for the OAuth link and sign-in flow."""

from urllib.parse import parse_qs, urlparse

import pytest

from stagelink.config import Settings
from stagelink.domain.repository import AccountRepository
from stagelink.domain.service import JWTService, TokenExchanger
from stagelink.domain.value import AccountId, ProviderKind
from tests.conftest import make_profile
from tests.harness import create_api_fixture

api_env = create_api_fixture()


async def sign_in_primary(api, subject_id: str = "user-1") -> None:
    settings = await api.get(Settings)
    token = JWTService(settings.auth).create_token(subject_id)
    api.client.cookies.set(settings.auth.session_cookie, token)


async def authorize(api, provider: str = "kick", intent: str = "link") -> str:
    response = await api.client.post(f"/oauth/{provider}/authorize", json={"intent": intent})
    assert response.status_code == 200, response.text
    return response.json()["state"]


async def callback(api, provider: str = "kick", **params):
    return await api.client.get(
        f"/oauth/{provider}/callback", params=params, follow_redirects=False
    )


def error_params(response) -> dict[str, str]:
    location = urlparse(response.headers["location"])
    assert location.path == "/auth/error"
    return {k: v[0] for k, v in parse_qs(location.query).items()}


class TestAuthorize:
    """Tests for POST /oauth/{provider}/authorize."""

    @pytest.mark.asyncio
    async def test_link_without_session_is_unauthorized(self, api_env):
        response = await api_env.client.post("/oauth/kick/authorize", json={})

        assert response.status_code == 401
        assert response.json()["detail"]["error"] == "not_authenticated"

    @pytest.mark.asyncio
    async def test_authorize_issues_client_context_cookie(self, api_env):
        await sign_in_primary(api_env)

        response = await api_env.client.post(
            "/oauth/twitter/authorize", json={"intent": "link"}
        )

        assert response.status_code == 200
        assert "client_context" in response.cookies
        assert "code_challenge=" in response.json()["authorization_url"]

    @pytest.mark.asyncio
    async def test_unknown_provider_rejected(self, api_env):
        response = await api_env.client.post("/oauth/myspace/authorize", json={})

        assert response.status_code == 422


class TestCallback:
    """Tests for GET /oauth/{provider}/callback."""

    @pytest.mark.asyncio
    async def test_link_flow_redirects_to_account_page(self, api_env):
        # Arrange
        await sign_in_primary(api_env)
        exchanger = await api_env.get(TokenExchanger)
        exchanger.register_code(ProviderKind.KICK, "abc123", make_profile())
        settings = await api_env.get(Settings)
        state = await authorize(api_env)

        # Act
        response = await callback(api_env, code="abc123", state=state)

        # Assert
        assert response.status_code == 302
        assert response.headers["location"] == (
            f"{settings.api.frontend_url}/account?linked=kick"
        )
        me = await api_env.client.get("/accounts/me")
        assert me.json()["linked"]["kick"]["username"] == "alice"

        repo = await api_env.get(AccountRepository)
        account = await repo.find_by_id(AccountId("user-1"))
        assert account.linked(ProviderKind.KICK).provider_user_id == "42"

    @pytest.mark.asyncio
    async def test_replayed_callback_reports_expired_attempt(self, api_env):
        await sign_in_primary(api_env)
        exchanger = await api_env.get(TokenExchanger)
        exchanger.register_code(ProviderKind.KICK, "abc123", make_profile())
        state = await authorize(api_env)
        await callback(api_env, code="abc123", state=state)

        response = await callback(api_env, code="abc123", state=state)

        params = error_params(response)
        assert params["error"] == "attempt_expired"
        assert params["provider"] == "Kick"

    @pytest.mark.asyncio
    async def test_forged_state_reports_mismatch(self, api_env):
        await sign_in_primary(api_env)
        await authorize(api_env)

        response = await callback(api_env, code="abc123", state="forged")

        assert error_params(response)["error"] == "state_mismatch"

    @pytest.mark.asyncio
    async def test_reused_code_reports_exchange_reason(self, api_env):
        await sign_in_primary(api_env)
        exchanger = await api_env.get(TokenExchanger)
        exchanger.register_code(ProviderKind.KICK, "abc123", make_profile())
        state = await authorize(api_env)
        await callback(api_env, code="abc123", state=state)
        state = await authorize(api_env)

        response = await callback(api_env, code="abc123", state=state)

        assert error_params(response)["error"] == "code_already_used"

    @pytest.mark.asyncio
    async def test_provider_denial_reported(self, api_env):
        await sign_in_primary(api_env)
        state = await authorize(api_env, provider="discord")

        response = await callback(
            api_env,
            provider="discord",
            state=state,
            error="access_denied",
            error_description="The user denied access",
        )

        params = error_params(response)
        assert params["error"] == "authorization_denied"
        assert params["provider"] == "Discord"

    @pytest.mark.asyncio
    async def test_callback_without_client_context(self, api_env):
        response = await callback(api_env, code="abc123", state="stateA")

        assert error_params(response)["error"] == "attempt_expired"


class TestSignInFlow:
    """Secondary sign-in from authorize through sign-out."""

    @pytest.mark.asyncio
    async def test_sign_in_session_access_sign_out(self, api_env):
        # Arrange
        exchanger = await api_env.get(TokenExchanger)
        exchanger.register_code(ProviderKind.KICK, "xyz", make_profile())
        settings = await api_env.get(Settings)
        state = await authorize(api_env, intent="sign_in")

        # Act
        response = await callback(api_env, code="xyz", state=state)
        session = await api_env.client.get("/session")
        access = await api_env.client.get("/access")
        await api_env.client.post("/session/sign-out")
        after = await api_env.client.get("/session")

        # Assert
        assert response.headers["location"] == (
            f"{settings.api.frontend_url}/?signed_in=kick"
        )
        assert session.json()["authenticated"] is True
        assert session.json()["identity"] == {"kind": "secondary", "id": "secondary:42"}
        assert access.json()["role"] == "viewer"
        assert after.json()["authenticated"] is False

    @pytest.mark.asyncio
    async def test_sign_in_with_twitter_not_supported(self, api_env):
        response = await api_env.client.post(
            "/oauth/twitter/authorize", json={"intent": "sign_in"}
        )

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "validation_error"
