"""Session routes."""

import logging

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, BackgroundTasks, Request, Response
from pydantic import BaseModel

from stagelink.application.usecase.session import (
    ResolveSessionUseCase,
    SignOutUseCase,
    TrackLoginUseCase,
)
from stagelink.application.usecase.session.resolve_session import (
    ResolveSessionRequest,
    ResolveSessionResponse,
)
from stagelink.application.usecase.session.sign_out import SignOutRequest
from stagelink.application.usecase.session.track_login import TrackLoginRequest
from stagelink.config import Settings
from stagelink.domain.service import JWTService
from stagelink.interface.api.cookies import client_ip, cookie_options, read_client_context

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/session", tags=["session"], route_class=DishkaRoute)


class SignOutResponse(BaseModel):
    """Sign-out response."""

    success: bool


@router.get("", response_model=ResolveSessionResponse)
async def get_session(
    request: Request,
    background_tasks: BackgroundTasks,
    use_case: FromDishka[ResolveSessionUseCase],
    track_login: FromDishka[TrackLoginUseCase],
    jwt_service: FromDishka[JWTService],
    settings: FromDishka[Settings],
) -> ResolveSessionResponse:
    """Resolve the caller's identity.

    Safe to call without a session: returns ``authenticated=false`` instead
    of an error. For primary sessions, IP reputation is recorded after the
    response is sent.
    """
    result = await use_case.execute(
        ResolveSessionRequest(
            primary_session=jwt_service.session_from_cookies(request.cookies),
            client_context=read_client_context(request, settings),
        )
    )

    if result.identity is not None and result.identity.is_primary:
        background_tasks.add_task(
            track_login.execute,
            TrackLoginRequest(
                identity=result.identity,
                client_ip=client_ip(request),
                user_agent=request.headers.get("user-agent"),
            ),
        )

    return result


@router.post("/sign-out", response_model=SignOutResponse)
async def sign_out(
    request: Request,
    response: Response,
    use_case: FromDishka[SignOutUseCase],
    settings: FromDishka[Settings],
) -> SignOutResponse:
    """Clear the secondary sign-in and the session cookie."""
    await use_case.execute(
        SignOutRequest(client_context=read_client_context(request, settings))
    )

    options = cookie_options(settings)
    response.delete_cookie(
        key=settings.auth.session_cookie,
        path=options["path"],
        secure=options["secure"],
        samesite=options["samesite"],
    )
    logger.info("Signed out")
    return SignOutResponse(success=True)
