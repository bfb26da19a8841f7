"""Unit tests for the HTTP token exchanger."""

import base64
import json
from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from stagelink.adapter.oauth import HttpTokenExchanger, MockTokenExchanger
from stagelink.adapter.oauth.exchanger import classify_token_error
from stagelink.config import AuthSettings, ProviderOAuthSettings
from stagelink.domain.error import ExchangeError, ExchangeFailure, PkceMismatchError
from stagelink.domain.value import ProviderKind
from tests.conftest import make_profile

REDIRECT_URI = "http://localhost:8000/oauth/kick/callback"


def auth_settings() -> AuthSettings:
    return AuthSettings(
        kick=ProviderOAuthSettings(
            client_id="kick-id", client_secret="kick-secret", scopes="user:read"
        ),
        twitter=ProviderOAuthSettings(
            client_id="tw-id", client_secret="tw-secret", scopes="users.read"
        ),
        discord=ProviderOAuthSettings(
            client_id="dc-id", client_secret="dc-secret", scopes="identify"
        ),
    )


class RecordingTransport:
    """Serves canned token and profile responses and records requests."""

    def __init__(self, token_response: httpx.Response, profile_response: httpx.Response):
        self.token_response = token_response
        self.profile_response = profile_response
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "POST":
            return self.token_response
        return self.profile_response


def make_exchanger(transport: RecordingTransport) -> HttpTokenExchanger:
    client = httpx.AsyncClient(transport=httpx.MockTransport(transport))
    return HttpTokenExchanger(auth_settings(), client)


KICK_PROFILE = {
    "data": [
        {
            "user_id": 42,
            "name": "alice",
            "email": "alice@example.com",
            "profile_picture": "https://files.kick.com/alice.webp",
        }
    ]
}


class TestExchange:
    """Tests for HttpTokenExchanger.exchange()."""

    @pytest.mark.asyncio
    async def test_kick_exchange_returns_normalized_profile(self):
        # Arrange
        transport = RecordingTransport(
            httpx.Response(200, json={"access_token": "tok", "token_type": "Bearer"}),
            httpx.Response(200, json=KICK_PROFILE),
        )
        exchanger = make_exchanger(transport)

        # Act
        result = await exchanger.exchange(ProviderKind.KICK, "abc123", "v1", REDIRECT_URI)

        # Assert
        assert result.access_token == "tok"
        assert result.profile.id == "42"
        assert result.profile.username == "alice"
        assert result.profile.avatar_url == "https://files.kick.com/alice.webp"

        token_request, profile_request = transport.requests
        form = parse_qs(token_request.content.decode())
        assert form["code"] == ["abc123"]
        assert form["code_verifier"] == ["v1"]
        assert form["client_secret"] == ["kick-secret"]
        assert form["redirect_uri"] == [REDIRECT_URI]
        assert profile_request.headers["Authorization"] == "Bearer tok"

    @pytest.mark.asyncio
    async def test_twitter_uses_basic_auth(self):
        transport = RecordingTransport(
            httpx.Response(200, json={"access_token": "tok"}),
            httpx.Response(
                200, json={"data": {"id": "99", "username": "bob", "name": "Bob"}}
            ),
        )
        exchanger = make_exchanger(transport)

        result = await exchanger.exchange(ProviderKind.TWITTER, "c", "v1", REDIRECT_URI)

        token_request = transport.requests[0]
        expected = base64.b64encode(b"tw-id:tw-secret").decode()
        assert token_request.headers["Authorization"] == f"Basic {expected}"
        assert "client_secret" not in parse_qs(token_request.content.decode())
        assert result.profile.display_name == "Bob"

    @pytest.mark.asyncio
    async def test_discord_does_not_need_verifier(self):
        transport = RecordingTransport(
            httpx.Response(200, json={"access_token": "tok"}),
            httpx.Response(
                200, json={"id": "7", "username": "carol", "global_name": None, "avatar": None}
            ),
        )
        exchanger = make_exchanger(transport)

        result = await exchanger.exchange(ProviderKind.DISCORD, "c", None, REDIRECT_URI)

        assert result.profile.display_name == "carol"
        assert result.profile.avatar_url.startswith("https://ui-avatars.com/api/?")

    @pytest.mark.asyncio
    async def test_missing_verifier_fails_before_any_request(self):
        transport = RecordingTransport(httpx.Response(200), httpx.Response(200))
        exchanger = make_exchanger(transport)

        with pytest.raises(PkceMismatchError):
            await exchanger.exchange(ProviderKind.KICK, "abc123", None, REDIRECT_URI)

        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_reused_code_is_code_already_used(self):
        body = {"error": "invalid_grant", "error_description": "code has been used"}
        transport = RecordingTransport(
            httpx.Response(400, json=body), httpx.Response(200)
        )
        exchanger = make_exchanger(transport)

        with pytest.raises(ExchangeError) as exc_info:
            await exchanger.exchange(ProviderKind.KICK, "abc123", "v1", REDIRECT_URI)

        assert exc_info.value.reason is ExchangeFailure.CODE_ALREADY_USED
        assert exc_info.value.status_code == 400
        assert json.loads(exc_info.value.raw_body) == body

    @pytest.mark.asyncio
    async def test_profile_failure_is_upstream_rejected(self):
        transport = RecordingTransport(
            httpx.Response(200, json={"access_token": "tok"}),
            httpx.Response(401, json={"message": "Unauthorized"}),
        )
        exchanger = make_exchanger(transport)

        with pytest.raises(ExchangeError) as exc_info:
            await exchanger.exchange(ProviderKind.KICK, "abc123", "v1", REDIRECT_URI)

        assert exc_info.value.reason is ExchangeFailure.UPSTREAM_REJECTED
        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_malformed_profile_is_upstream_rejected(self):
        transport = RecordingTransport(
            httpx.Response(200, json={"access_token": "tok"}),
            httpx.Response(200, json={"data": []}),
        )
        exchanger = make_exchanger(transport)

        with pytest.raises(ExchangeError) as exc_info:
            await exchanger.exchange(ProviderKind.KICK, "abc123", "v1", REDIRECT_URI)

        assert exc_info.value.reason is ExchangeFailure.UPSTREAM_REJECTED

    @pytest.mark.asyncio
    async def test_network_error_is_upstream_rejected(self):
        def fail(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(fail))
        exchanger = HttpTokenExchanger(auth_settings(), client)

        with pytest.raises(ExchangeError) as exc_info:
            await exchanger.exchange(ProviderKind.KICK, "abc123", "v1", REDIRECT_URI)

        assert exc_info.value.reason is ExchangeFailure.UPSTREAM_REJECTED
        assert exc_info.value.status_code is None


class TestClassifyTokenError:
    """Tests for classify_token_error()."""

    def test_verifier_rejection_is_pkce_mismatch(self):
        payload = {"error": "invalid_grant", "error_description": "Invalid code_verifier"}

        error = classify_token_error(ProviderKind.KICK, 400, json.dumps(payload), payload)

        assert isinstance(error, PkceMismatchError)

    def test_other_errors_are_upstream_rejected(self):
        payload = {"error": "invalid_client"}

        error = classify_token_error(ProviderKind.DISCORD, 401, "", payload)

        assert isinstance(error, ExchangeError)
        assert error.reason is ExchangeFailure.UPSTREAM_REJECTED

    def test_non_json_body_is_upstream_rejected(self):
        error = classify_token_error(ProviderKind.TWITTER, 502, "Bad Gateway", None)

        assert error.reason is ExchangeFailure.UPSTREAM_REJECTED
        assert error.raw_body == "Bad Gateway"


class TestAuthorizationUrl:
    """Tests for HttpTokenExchanger.authorization_url()."""

    def test_kick_url_carries_state_and_s256_challenge(self):
        exchanger = HttpTokenExchanger(auth_settings(), httpx.AsyncClient())

        url = exchanger.authorization_url(ProviderKind.KICK, "stateA", REDIRECT_URI, "v1")

        parsed = urlparse(url)
        query = parse_qs(parsed.query)
        assert parsed.netloc == "id.kick.com"
        assert query["state"] == ["stateA"]
        assert query["client_id"] == ["kick-id"]
        assert query["code_challenge_method"] == ["S256"]
        assert query["scope"] == ["user:read"]

    def test_discord_url_without_verifier_has_no_challenge(self):
        exchanger = HttpTokenExchanger(auth_settings(), httpx.AsyncClient())

        url = exchanger.authorization_url(ProviderKind.DISCORD, "s", REDIRECT_URI)

        assert "code_challenge" not in parse_qs(urlparse(url).query)


class TestMockTokenExchanger:
    """Tests for the in-process exchanger used by tests and local runs."""

    @pytest.mark.asyncio
    async def test_code_redeemable_once(self):
        exchanger = MockTokenExchanger()
        exchanger.register_code(ProviderKind.KICK, "abc123", make_profile(), "v1")

        await exchanger.exchange(ProviderKind.KICK, "abc123", "v1", REDIRECT_URI)

        with pytest.raises(ExchangeError) as exc_info:
            await exchanger.exchange(ProviderKind.KICK, "abc123", "v1", REDIRECT_URI)
        assert exc_info.value.reason is ExchangeFailure.CODE_ALREADY_USED

    @pytest.mark.asyncio
    async def test_wrong_verifier_is_pkce_mismatch(self):
        exchanger = MockTokenExchanger()
        exchanger.register_code(ProviderKind.KICK, "abc123", make_profile(), "v1")

        with pytest.raises(PkceMismatchError):
            await exchanger.exchange(ProviderKind.KICK, "abc123", "v2", REDIRECT_URI)
