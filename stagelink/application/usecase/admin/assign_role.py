"""Assign role use case."""

from pydantic import BaseModel

from stagelink.domain.service import AccessEvaluator, AccountService
from stagelink.domain.value import AccountId, PrimarySession, Role

from ..account.view import AccountView
from ..base import BaseUseCase
from .authorization import require_admin


class AssignRoleRequest(BaseModel):
    """Assign a role to another account."""

    account_id: str
    role: Role
    primary_session: PrimarySession | None = None


class AssignRoleUseCase(BaseUseCase):
    """Admin-only role assignment."""

    def __init__(
        self, access_evaluator: AccessEvaluator, account_service: AccountService
    ) -> None:
        """Initialize assign role use case.

        Args:
            access_evaluator: Checks the caller's role
            account_service: Account service
        """
        self.access_evaluator = access_evaluator
        self.account_service = account_service

    async def execute(self, request: AssignRoleRequest) -> AccountView:
        """Assign the role.

        Raises:
            NotAuthorizedError: Caller is not an admin
            NotFoundError: Target account does not exist
        """
        await require_admin(
            self.access_evaluator, request.primary_session, "assign roles"
        )
        account = await self.account_service.assign_role(
            AccountId(request.account_id), request.role
        )
        return AccountView.from_account(account)
