"""Observability configuration using Logfire.

Services and adapters log through Logfire directly:

    import logfire

    logfire.info("Provider identity linked", account_id=account_id, provider="kick")

    with logfire.span("identity_linker.link", provider="kick"):
        ...

Routes use stdlib ``logging``, which ends up on the same console.
"""

import logfire
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine

from stagelink.config import Settings


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire for observability.

    Telemetry is sent to Logfire cloud when explicitly enabled, or when a
    token is configured and the flag is unset. Otherwise output stays on the
    console.

    Args:
        settings: Application settings
    """
    if settings.observability.send_to_logfire is not None:
        send_to_logfire = settings.observability.send_to_logfire
    else:
        send_to_logfire = bool(settings.observability.logfire_token)

    config_kwargs = {
        "service_name": "stagelink-api",
        "service_version": settings.git_sha,
        "environment": settings.environment,
        "send_to_logfire": send_to_logfire,
        "console": logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
    }

    if settings.observability.logfire_token:
        config_kwargs["token"] = settings.observability.logfire_token

    logfire.configure(**config_kwargs)

    logfire.info(
        "Observability configured",
        environment=settings.environment,
        send_to_logfire=send_to_logfire,
        has_token=bool(settings.observability.logfire_token),
    )


def instrument_fastapi(app: FastAPI) -> None:
    """Trace every request handled by the app.

    OAuth callback query strings carry single-use codes, so only the path is
    recorded.
    """

    def _map_request_attributes(request, attributes):
        result = {**attributes}
        if hasattr(request, "method"):
            result["method"] = request.method
        if hasattr(request, "url"):
            result["path"] = request.url.path
        if hasattr(request, "client") and request.client:
            result["client_host"] = request.client.host
        return result

    logfire.instrument_fastapi(
        app,
        capture_headers=False,
        request_attributes_mapper=_map_request_attributes,
    )
    logfire.info("FastAPI instrumented")


def instrument_sqlalchemy(engine: AsyncEngine) -> None:
    """Trace SQL statements issued through the engine."""
    logfire.instrument_sqlalchemy(engine=engine.sync_engine, enable_commenter=True)
    logfire.info("SQLAlchemy instrumented")


def instrument_httpx() -> None:
    """Trace outbound provider and reputation requests."""
    logfire.instrument_httpx()
    logfire.info("httpx instrumented")
