"""IP reputation lookups against proxycheck.io."""

from typing import Any, Optional

import httpx
import logfire

from stagelink.adapter.error import ReputationLookupError
from stagelink.config import RiskSettings
from stagelink.domain.service.risk_intake import ReputationLookup
from stagelink.domain.value import RiskAssessment


def parse_verdict(ip_address: str, body: Any) -> RiskAssessment:
    """Turn a proxycheck.io v2 response into an assessment.

    Raises:
        ReputationLookupError: The response carries no verdict for the address
    """
    if not isinstance(body, dict):
        raise ReputationLookupError("Reputation response is not an object")

    status = body.get("status")
    if status not in ("ok", "warning"):
        raise ReputationLookupError(
            f"Reputation lookup status {status!r}: {body.get('message', '')}"
        )

    verdict = body.get(ip_address)
    if not isinstance(verdict, dict):
        raise ReputationLookupError(f"No verdict for {ip_address}")

    is_listed = verdict.get("proxy") == "yes"
    proxy_type = verdict.get("type") or None
    kind = (proxy_type or "").upper()

    try:
        risk_score = int(verdict.get("risk") or 0)
    except (TypeError, ValueError):
        risk_score = 0

    return RiskAssessment(
        is_vpn=is_listed and kind == "VPN",
        is_tor=is_listed and kind == "TOR",
        is_proxy=is_listed and kind not in ("VPN", "TOR"),
        proxy_type=proxy_type,
        risk_score=max(0, min(risk_score, 100)),
        country_code=verdict.get("isocode"),
        country_name=verdict.get("country"),
        provider_name=verdict.get("provider"),
    )


class ProxyCheckReputationLookup(ReputationLookup):
    """proxycheck.io v2 client."""

    def __init__(self, risk_settings: RiskSettings, http_client: httpx.AsyncClient):
        """Initialize client.

        Args:
            risk_settings: API key, base URL and timeout
            http_client: Shared HTTP client
        """
        self.risk_settings = risk_settings
        self.http_client = http_client

    async def lookup(self, ip_address: str) -> RiskAssessment:
        params = {
            "vpn": "1",
            "asn": "1",
            "risk": "1",
            "provider": "1",
            "country": "1",
        }
        if self.risk_settings.proxycheck_api_key:
            params["key"] = self.risk_settings.proxycheck_api_key

        with logfire.span("proxycheck.lookup", ip_address=ip_address):
            try:
                response = await self.http_client.get(
                    f"{self.risk_settings.base_url.rstrip('/')}/{ip_address}",
                    params=params,
                    timeout=self.risk_settings.timeout_seconds,
                )
                response.raise_for_status()
                body = response.json()
            except (httpx.HTTPError, ValueError) as e:
                raise ReputationLookupError(f"Reputation request failed: {e}") from e

            assessment = parse_verdict(ip_address, body)
            logfire.info(
                "Reputation lookup completed",
                ip_address=ip_address,
                risk_score=assessment.risk_score,
                proxy_type=assessment.proxy_type,
            )
            return assessment


class StaticReputationLookup(ReputationLookup):
    """Fixed verdicts for tests and local development.

    Unknown addresses get a neutral assessment; addresses in ``failing``
    raise as if the service were down.
    """

    def __init__(
        self,
        verdicts: Optional[dict[str, RiskAssessment]] = None,
        failing: Optional[set[str]] = None,
    ) -> None:
        self.verdicts = dict(verdicts or {})
        self.failing = set(failing or ())
        self.lookups: list[str] = []

    async def lookup(self, ip_address: str) -> RiskAssessment:
        self.lookups.append(ip_address)
        if ip_address in self.failing:
            raise ReputationLookupError(f"Reputation service unavailable for {ip_address}")
        return self.verdicts.get(ip_address, RiskAssessment.neutral())
