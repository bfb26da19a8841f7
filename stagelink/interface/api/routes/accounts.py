"""Account routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Request

from stagelink.application.usecase.account import AccountView, GetAccountUseCase
from stagelink.application.usecase.account.get_account import GetAccountRequest
from stagelink.application.usecase.link import UnlinkUseCase
from stagelink.application.usecase.link.unlink import UnlinkRequest
from stagelink.domain.error import DomainError
from stagelink.domain.service import JWTService
from stagelink.domain.value import ProviderKind
from stagelink.interface.error import to_http_exception

router = APIRouter(prefix="/accounts", tags=["accounts"], route_class=DishkaRoute)


@router.get("/me", response_model=AccountView)
async def get_my_account(
    request: Request,
    use_case: FromDishka[GetAccountUseCase],
    jwt_service: FromDishka[JWTService],
) -> AccountView:
    """Signed-in account with its role and linked provider identities.

    Raises:
        HTTPException: 401 without a valid session
    """
    try:
        return await use_case.execute(
            GetAccountRequest(
                primary_session=jwt_service.session_from_cookies(request.cookies)
            )
        )
    except DomainError as e:
        raise to_http_exception(e)


@router.delete("/me/links/{provider}", response_model=AccountView)
async def unlink_provider(
    provider: ProviderKind,
    request: Request,
    use_case: FromDishka[UnlinkUseCase],
    jwt_service: FromDishka[JWTService],
) -> AccountView:
    """Remove one provider link. Other links and the role are unchanged."""
    try:
        return await use_case.execute(
            UnlinkRequest(
                provider=provider,
                primary_session=jwt_service.session_from_cookies(request.cookies),
            )
        )
    except DomainError as e:
        raise to_http_exception(e)
