"""Cookie and client helpers shared by routes."""

import secrets

from fastapi import Request, Response

from stagelink.config import Settings


def cookie_options(settings: Settings) -> dict:
    """Cookie attributes for the environment.

    Production serves the API and frontend from different sites, which needs
    ``SameSite=None`` and therefore ``Secure``.
    """
    if settings.is_production:
        return {"httponly": True, "secure": True, "samesite": "none", "path": "/"}
    return {"httponly": True, "secure": False, "samesite": "lax", "path": "/"}


def read_client_context(request: Request, settings: Settings) -> str | None:
    """Client context id from the request cookie, if any."""
    return request.cookies.get(settings.auth.client_context_cookie) or None


def ensure_client_context(
    request: Request, response: Response, settings: Settings
) -> str:
    """Client context id, issuing a new cookie when the request has none."""
    existing = read_client_context(request, settings)
    if existing:
        return existing

    client_context = secrets.token_urlsafe(24)
    response.set_cookie(
        key=settings.auth.client_context_cookie,
        value=client_context,
        max_age=settings.auth.jwt_expiry_days * 24 * 60 * 60,
        **cookie_options(settings),
    )
    return client_context


def client_ip(request: Request) -> str:
    """Best-effort client address behind Cloudflare or a reverse proxy."""
    forwarded = (
        request.headers.get("cf-connecting-ip")
        or request.headers.get("x-forwarded-for")
        or request.headers.get("x-real-ip")
    )
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client:
        return request.client.host
    return "unknown"
