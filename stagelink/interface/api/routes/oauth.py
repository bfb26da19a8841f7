"""OAuth linking and sign-in routes."""

import logging

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Request, Response, status
from fastapi.responses import RedirectResponse
from pydantic import BaseModel

from stagelink.application.usecase.link import (
    BeginAuthorizationUseCase,
    CompleteAuthorizationUseCase,
)
from stagelink.application.usecase.link.begin_authorization import (
    BeginAuthorizationRequest,
    BeginAuthorizationResponse,
)
from stagelink.application.usecase.link.complete_authorization import (
    CompleteAuthorizationRequest,
)
from stagelink.config import Settings
from stagelink.domain.error import DomainError, ExchangeError
from stagelink.domain.service import JWTService
from stagelink.domain.value import OAuthIntent, ProviderKind
from stagelink.interface.api.cookies import ensure_client_context, read_client_context
from stagelink.interface.error import error_redirect_url, to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/oauth", tags=["oauth"], route_class=DishkaRoute)


class AuthorizeRequest(BaseModel):
    """Authorize request body."""

    intent: OAuthIntent = OAuthIntent.LINK


@router.post("/{provider}/authorize", response_model=BeginAuthorizationResponse)
async def authorize(
    provider: ProviderKind,
    body: AuthorizeRequest,
    request: Request,
    response: Response,
    use_case: FromDishka[BeginAuthorizationUseCase],
    jwt_service: FromDishka[JWTService],
    settings: FromDishka[Settings],
) -> BeginAuthorizationResponse:
    """Start an OAuth flow and return the provider URL.

    ``intent=link`` attaches the provider account to the signed-in account;
    ``intent=sign_in`` signs in with the provider account alone.

    Example:
        POST /oauth/kick/authorize
        {"intent": "link"}

        Response:
        {
            "authorization_url": "https://id.kick.com/oauth/authorize?...",
            "state": "..."
        }
    """
    client_context = ensure_client_context(request, response, settings)
    logger.info(f"Starting {provider.value} OAuth flow: intent={body.intent.value}")

    try:
        return await use_case.execute(
            BeginAuthorizationRequest(
                provider=provider,
                intent=body.intent,
                client_context=client_context,
                primary_session=jwt_service.session_from_cookies(request.cookies),
            )
        )
    except DomainError as e:
        raise to_http_exception(e)


@router.get("/{provider}/callback")
async def callback(
    provider: ProviderKind,
    request: Request,
    use_case: FromDishka[CompleteAuthorizationUseCase],
    jwt_service: FromDishka[JWTService],
    settings: FromDishka[Settings],
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
    error_description: str | None = None,
) -> RedirectResponse:
    """Handle the provider redirect and send the browser back to the frontend.

    Success:
        link flow    -> {frontend}/account?linked=<provider>
        sign-in flow -> {frontend}/?signed_in=<provider>

    Failure:
        {frontend}/auth/error?provider=<Provider>&error=<code>&message=<text>
    """
    frontend_url = settings.api.frontend_url
    logger.info(f"OAuth callback received: provider={provider.value}")

    try:
        result = await use_case.execute(
            CompleteAuthorizationRequest(
                provider=provider,
                client_context=read_client_context(request, settings),
                code=code,
                state=state,
                error=error,
                error_description=error_description,
                primary_session=jwt_service.session_from_cookies(request.cookies),
            )
        )
    except ExchangeError as e:
        logger.error(
            f"{provider.value} exchange failed: reason={e.reason.value}, "
            f"status={e.status_code}"
        )
        return RedirectResponse(
            url=error_redirect_url(frontend_url, provider, e.reason.value, str(e)),
            status_code=status.HTTP_302_FOUND,
        )
    except DomainError as e:
        logger.warning(f"{provider.value} OAuth callback failed: {e.code}: {e}")
        return RedirectResponse(
            url=error_redirect_url(frontend_url, provider, e.code, str(e)),
            status_code=status.HTTP_302_FOUND,
        )
    except Exception as e:
        logger.exception(f"Unexpected error during OAuth callback: {str(e)}")
        return RedirectResponse(
            url=error_redirect_url(
                frontend_url, provider, "unexpected", "Something went wrong"
            ),
            status_code=status.HTTP_302_FOUND,
        )

    if result.intent is OAuthIntent.SIGN_IN:
        target = f"{frontend_url}/?signed_in={provider.value}"
    else:
        target = f"{frontend_url}/account?linked={provider.value}"

    logger.info(f"{provider.value} OAuth flow completed, redirecting to: {target}")
    return RedirectResponse(url=target, status_code=status.HTTP_302_FOUND)
