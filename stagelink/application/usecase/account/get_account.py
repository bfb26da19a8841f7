"""Get account use case."""

from pydantic import BaseModel

from stagelink.domain.error import NotAuthenticatedError
from stagelink.domain.service import AccountService
from stagelink.domain.value import AccountId, PrimarySession

from ..base import BaseUseCase
from .view import AccountView


class GetAccountRequest(BaseModel):
    """Get the caller's account."""

    primary_session: PrimarySession | None = None


class GetAccountUseCase(BaseUseCase):
    """Returns the caller's account, provisioning it on first use."""

    def __init__(self, account_service: AccountService) -> None:
        """Initialize get account use case.

        Args:
            account_service: Account service
        """
        self.account_service = account_service

    async def execute(self, request: GetAccountRequest) -> AccountView:
        """Get account view.

        Raises:
            NotAuthenticatedError: No primary session
        """
        if request.primary_session is None:
            raise NotAuthenticatedError()

        account = await self.account_service.ensure_account(
            AccountId(request.primary_session.id)
        )
        return AccountView.from_account(account)
