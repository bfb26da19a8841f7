"""Access routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Request

from stagelink.application.usecase.session import AccessSummary, GetAccessUseCase
from stagelink.application.usecase.session.get_access import GetAccessRequest
from stagelink.config import Settings
from stagelink.domain.service import JWTService
from stagelink.interface.api.cookies import read_client_context

router = APIRouter(tags=["access"], route_class=DishkaRoute)


@router.get("/access", response_model=AccessSummary)
async def get_access(
    request: Request,
    use_case: FromDishka[GetAccessUseCase],
    jwt_service: FromDishka[JWTService],
    settings: FromDishka[Settings],
) -> AccessSummary:
    """Role, feature grants and panel access for the caller.

    Anonymous callers get the lowest role and no features.

    Example:
        {
            "identity": {"kind": "primary", "id": "user-1"},
            "role": "streamer",
            "features": {"bonus_hunt": true, "admin_tickets": false},
            "is_verified_viewer": true,
            "can_access_operator_panel": true,
            "can_access_admin_panel": false
        }
    """
    return await use_case.execute(
        GetAccessRequest(
            primary_session=jwt_service.session_from_cookies(request.cookies),
            client_context=read_client_context(request, settings),
        )
    )
