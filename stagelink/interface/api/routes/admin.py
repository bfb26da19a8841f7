"""Administrative routes. Callers must hold exactly the admin role."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Query, Request
from pydantic import BaseModel

from stagelink.application.usecase.account import AccountView
from stagelink.application.usecase.admin import (
    AssignRoleUseCase,
    ListRiskRecordsUseCase,
    ListSharedIpsUseCase,
)
from stagelink.application.usecase.admin.assign_role import AssignRoleRequest
from stagelink.application.usecase.admin.list_risk_records import (
    ListRiskRecordsRequest,
    ListRiskRecordsResponse,
)
from stagelink.application.usecase.admin.list_shared_ips import (
    ListSharedIpsRequest,
    ListSharedIpsResponse,
)
from stagelink.domain.error import DomainError
from stagelink.domain.service import JWTService
from stagelink.domain.value import Role
from stagelink.interface.error import to_http_exception

router = APIRouter(prefix="/admin", tags=["admin"], route_class=DishkaRoute)


class AssignRoleBody(BaseModel):
    """Assign role request body."""

    role: Role


@router.put("/accounts/{account_id}/role", response_model=AccountView)
async def assign_role(
    account_id: str,
    body: AssignRoleBody,
    request: Request,
    use_case: FromDishka[AssignRoleUseCase],
    jwt_service: FromDishka[JWTService],
) -> AccountView:
    """Assign a role to an account."""
    try:
        return await use_case.execute(
            AssignRoleRequest(
                account_id=account_id,
                role=body.role,
                primary_session=jwt_service.session_from_cookies(request.cookies),
            )
        )
    except DomainError as e:
        raise to_http_exception(e)


@router.get("/risk-records", response_model=ListRiskRecordsResponse)
async def list_risk_records(
    request: Request,
    use_case: FromDishka[ListRiskRecordsUseCase],
    jwt_service: FromDishka[JWTService],
    flagged: bool = False,
    identity_id: str | None = None,
    limit: int = Query(default=100, ge=1, le=500),
) -> ListRiskRecordsResponse:
    """Recorded connections, newest first. ``flagged=true`` keeps VPN/proxy/Tor hits."""
    try:
        return await use_case.execute(
            ListRiskRecordsRequest(
                primary_session=jwt_service.session_from_cookies(request.cookies),
                identity_id=identity_id,
                flagged_only=flagged,
                limit=limit,
            )
        )
    except DomainError as e:
        raise to_http_exception(e)


@router.get("/shared-ips", response_model=ListSharedIpsResponse)
async def list_shared_ips(
    request: Request,
    use_case: FromDishka[ListSharedIpsUseCase],
    jwt_service: FromDishka[JWTService],
    min_identities: int = Query(default=2, ge=2),
    limit: int = Query(default=100, ge=1, le=500),
) -> ListSharedIpsResponse:
    """Addresses tracked for several identities, a hint of alt accounts."""
    try:
        return await use_case.execute(
            ListSharedIpsRequest(
                primary_session=jwt_service.session_from_cookies(request.cookies),
                min_identities=min_identities,
                limit=limit,
            )
        )
    except DomainError as e:
        raise to_http_exception(e)
