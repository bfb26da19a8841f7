"""Health check routes."""

from datetime import datetime, timezone

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter
from pydantic import BaseModel

from stagelink.config import Settings
from stagelink.domain.value import ProviderKind

router = APIRouter(tags=["health"], route_class=DishkaRoute)

UNSET_CREDENTIAL = "CHANGE_ME_IN_PRODUCTION"


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    environment: str
    git_sha: str
    # Provider kind -> whether real OAuth credentials are configured
    providers: dict[str, bool]


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: FromDishka[Settings]) -> HealthResponse:
    """Liveness plus a view of which identity providers can be linked."""
    providers = {
        kind.value: settings.auth.provider(kind).client_id != UNSET_CREDENTIAL
        for kind in ProviderKind
    }
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        environment=settings.environment,
        git_sha=settings.git_sha,
        providers=providers,
    )
