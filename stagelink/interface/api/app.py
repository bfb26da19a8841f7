"""FastAPI application."""

from dishka import AsyncContainer
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stagelink.config import Settings
from stagelink.interface.api.routes import (
    access,
    accounts,
    admin,
    health,
    oauth,
    session,
)
from stagelink.util.di.container import create_container, setup_di
from stagelink.util.observability import (
    instrument_fastapi,
    instrument_httpx,
)


def create_app(container: AsyncContainer | None = None) -> FastAPI:
    """Create FastAPI application.

    Note: Logfire should be configured before calling this function.
    In production, start_app.py handles this.

    Args:
        container: DI container to use; the production container when omitted
    """
    settings = Settings()

    # Outbound calls to providers and proxycheck.io
    instrument_httpx()

    app_instance = FastAPI(
        title="Stagelink API",
        description="Identity linking and access control for the Stagelink streaming community",
        version="0.1.0",
    )

    instrument_fastapi(app_instance)

    # Cookies carry the session, so credentials must be allowed
    app_instance.add_middleware(
        CORSMiddleware,
        allow_origins=[
            settings.api.frontend_url,
            "http://localhost:3000",  # Local development
            "http://localhost:5173",  # Vite default
        ],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=[
            "Content-Type",
            "Accept",
            "Origin",
            "User-Agent",
            "Cache-Control",
            "X-Requested-With",
        ],
        expose_headers=["Content-Length", "Content-Type"],
        max_age=600,
    )

    setup_di(app_instance, container or create_container())

    app_instance.include_router(health.router)
    app_instance.include_router(oauth.router)
    app_instance.include_router(session.router)
    app_instance.include_router(access.router)
    app_instance.include_router(accounts.router)
    app_instance.include_router(admin.router)

    return app_instance


# Create app instance for uvicorn
# Note: Logfire must be configured before this module is imported
app = create_app()
