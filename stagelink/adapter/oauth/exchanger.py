"""OAuth 2.0 authorization-code exchange over HTTP.

One generic flow for every provider: a form-encoded token request followed
by a bearer-authenticated profile request. Provider differences live in
``providers.py``.
"""

from typing import Optional

import httpx
import logfire
from pydantic import ValidationError as PydanticValidationError

from stagelink.adapter.error import ProviderError
from stagelink.adapter.oauth.providers import (
    ENDPOINTS,
    NORMALIZERS,
    build_authorization_url,
)
from stagelink.config import AuthSettings
from stagelink.domain.error import ExchangeError, ExchangeFailure, PkceMismatchError
from stagelink.domain.service.token_exchange import TokenExchanger
from stagelink.domain.value import ExchangeResult, ExternalProfile, ProviderKind
from stagelink.util.pkce import code_challenge_for


def classify_token_error(
    provider: ProviderKind, status_code: int, body: str, payload: object
) -> Exception:
    """Map a failed token response to a domain error.

    ``invalid_grant`` that mentions the verifier is a PKCE mismatch; any
    other ``invalid_grant`` means the code was already redeemed or expired.
    """
    error = ""
    description = ""
    if isinstance(payload, dict):
        error = str(payload.get("error") or "")
        description = str(payload.get("error_description") or "")

    if error == "invalid_grant":
        if "verifier" in description.lower():
            return PkceMismatchError(provider.display_name, description)
        return ExchangeError(
            provider.display_name,
            ExchangeFailure.CODE_ALREADY_USED,
            status_code=status_code,
            raw_body=body,
        )

    return ExchangeError(
        provider.display_name,
        ExchangeFailure.UPSTREAM_REJECTED,
        status_code=status_code,
        raw_body=body,
    )


class HttpTokenExchanger(TokenExchanger):
    """Token exchanger talking to the real provider endpoints."""

    def __init__(
        self,
        auth_settings: AuthSettings,
        http_client: httpx.AsyncClient,
        timeout: float = 30.0,
    ) -> None:
        """Initialize exchanger.

        Args:
            auth_settings: Provider credentials and scopes
            http_client: Shared HTTP client
            timeout: Per-request timeout in seconds
        """
        self.auth_settings = auth_settings
        self.http_client = http_client
        self.timeout = timeout

    def requires_pkce(self, provider: ProviderKind) -> bool:
        return ENDPOINTS[provider].pkce_required

    def authorization_url(
        self,
        provider: ProviderKind,
        state: str,
        redirect_uri: str,
        code_verifier: Optional[str] = None,
    ) -> str:
        credentials = self.auth_settings.provider(provider)
        challenge = code_challenge_for(code_verifier) if code_verifier else None
        url = build_authorization_url(
            ENDPOINTS[provider],
            client_id=credentials.client_id,
            redirect_uri=redirect_uri,
            state=state,
            scopes=credentials.scopes,
            code_challenge=challenge,
        )
        logfire.info(
            "OAuth authorization initiated",
            provider=provider.value,
            redirect_uri=redirect_uri,
        )
        return url

    async def exchange(
        self,
        provider: ProviderKind,
        authorization_code: str,
        pkce_verifier: Optional[str],
        redirect_uri: str,
    ) -> ExchangeResult:
        if self.requires_pkce(provider) and not pkce_verifier:
            raise PkceMismatchError(provider.display_name, "PKCE verifier is missing")

        with logfire.span("oauth.exchange", provider=provider.value):
            access_token = await self._request_token(
                provider, authorization_code, pkce_verifier, redirect_uri
            )
            profile = await self._fetch_profile(provider, access_token)
            logfire.info(
                "OAuth exchange completed",
                provider=provider.value,
                provider_user_id=profile.id,
                username=profile.username,
            )
            return ExchangeResult(access_token=access_token, profile=profile)

    async def _request_token(
        self,
        provider: ProviderKind,
        code: str,
        code_verifier: Optional[str],
        redirect_uri: str,
    ) -> str:
        endpoints = ENDPOINTS[provider]
        credentials = self.auth_settings.provider(provider)

        data = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": redirect_uri,
            "client_id": credentials.client_id,
        }
        if code_verifier:
            data["code_verifier"] = code_verifier

        auth = None
        if endpoints.basic_auth:
            auth = httpx.BasicAuth(credentials.client_id, credentials.client_secret)
        else:
            data["client_secret"] = credentials.client_secret

        try:
            response = await self.http_client.post(
                endpoints.token_url,
                data=data,
                auth=auth,
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            logfire.error(
                "Token exchange HTTP error", provider=provider.value, error=str(e)
            )
            raise ExchangeError(
                provider.display_name, ExchangeFailure.UPSTREAM_REJECTED
            ) from e

        if response.status_code != 200:
            logfire.error(
                "Token exchange failed",
                provider=provider.value,
                status_code=response.status_code,
                error=response.text,
            )
            raise classify_token_error(
                provider, response.status_code, response.text, _json_or_none(response)
            )

        payload = _json_or_none(response)
        token = payload.get("access_token") if isinstance(payload, dict) else None
        if not token:
            raise ExchangeError(
                provider.display_name,
                ExchangeFailure.UPSTREAM_REJECTED,
                status_code=response.status_code,
                raw_body=response.text,
            )
        return token

    async def _fetch_profile(
        self, provider: ProviderKind, access_token: str
    ) -> ExternalProfile:
        endpoints = ENDPOINTS[provider]

        try:
            response = await self.http_client.get(
                endpoints.profile_url,
                params=endpoints.profile_params or None,
                headers={
                    "Authorization": f"Bearer {access_token}",
                    "Accept": "application/json",
                },
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            logfire.error(
                "Profile request HTTP error", provider=provider.value, error=str(e)
            )
            raise ExchangeError(
                provider.display_name, ExchangeFailure.UPSTREAM_REJECTED
            ) from e

        if response.status_code != 200:
            logfire.error(
                "Profile request failed",
                provider=provider.value,
                status_code=response.status_code,
                error=response.text,
            )
            raise ExchangeError(
                provider.display_name,
                ExchangeFailure.UPSTREAM_REJECTED,
                status_code=response.status_code,
                raw_body=response.text,
            )

        try:
            return NORMALIZERS[provider](_json_or_none(response))
        except (ProviderError, PydanticValidationError) as e:
            logfire.error(
                "Profile response unusable", provider=provider.value, error=str(e)
            )
            raise ExchangeError(
                provider.display_name,
                ExchangeFailure.UPSTREAM_REJECTED,
                status_code=response.status_code,
                raw_body=response.text,
            ) from e


def _json_or_none(response: httpx.Response) -> object:
    try:
        return response.json()
    except ValueError:
        return None


class MockTokenExchanger(TokenExchanger):
    """Deterministic exchanger for tests and local development.

    Codes are registered up front with the verifier they expect and the
    profile they yield. Each code can be redeemed once; unknown codes are
    rejected the way a provider rejects them.
    """

    def __init__(self) -> None:
        self._grants: dict[tuple[ProviderKind, str], tuple[Optional[str], ExternalProfile]] = {}
        self._used: set[tuple[ProviderKind, str]] = set()
        self.exchange_calls: list[tuple[ProviderKind, str]] = []

    def register_code(
        self,
        provider: ProviderKind,
        code: str,
        profile: ExternalProfile,
        expected_verifier: Optional[str] = None,
    ) -> None:
        """Make ``code`` redeemable once for ``profile``.

        ``expected_verifier`` of None accepts any verifier.
        """
        self._grants[(provider, code)] = (expected_verifier, profile)

    def requires_pkce(self, provider: ProviderKind) -> bool:
        return ENDPOINTS[provider].pkce_required

    def authorization_url(
        self,
        provider: ProviderKind,
        state: str,
        redirect_uri: str,
        code_verifier: Optional[str] = None,
    ) -> str:
        params = {"state": state, "redirect_uri": redirect_uri, "mock": "true"}
        if code_verifier:
            params["code_challenge"] = code_challenge_for(code_verifier)
        return f"{ENDPOINTS[provider].authorize_url}?{httpx.QueryParams(params)}"

    async def exchange(
        self,
        provider: ProviderKind,
        authorization_code: str,
        pkce_verifier: Optional[str],
        redirect_uri: str,
    ) -> ExchangeResult:
        self.exchange_calls.append((provider, authorization_code))
        if self.requires_pkce(provider) and not pkce_verifier:
            raise PkceMismatchError(provider.display_name, "PKCE verifier is missing")

        key = (provider, authorization_code)
        if key in self._used:
            raise ExchangeError(
                provider.display_name,
                ExchangeFailure.CODE_ALREADY_USED,
                status_code=400,
                raw_body='{"error":"invalid_grant"}',
            )

        grant = self._grants.get(key)
        if grant is None:
            raise ExchangeError(
                provider.display_name,
                ExchangeFailure.UPSTREAM_REJECTED,
                status_code=400,
                raw_body='{"error":"invalid_request"}',
            )

        expected_verifier, profile = grant
        if expected_verifier is not None and pkce_verifier != expected_verifier:
            raise PkceMismatchError(
                provider.display_name, "code_verifier does not match the challenge"
            )

        self._used.add(key)
        return ExchangeResult(
            access_token=f"mock-token-{provider.value}-{authorization_code}",
            profile=profile,
        )
