"""Unlink provider use case."""

from pydantic import BaseModel

from stagelink.domain.service import IdentityLinker
from stagelink.domain.value import AccountId, PrimarySession, ProviderKind

from ..account.view import AccountView
from ..base import BaseUseCase


class UnlinkRequest(BaseModel):
    """Unlink one provider from the caller's account."""

    provider: ProviderKind
    primary_session: PrimarySession | None = None


class UnlinkUseCase(BaseUseCase):
    """Use case for removing a provider link."""

    def __init__(self, identity_linker: IdentityLinker) -> None:
        """Initialize unlink use case.

        Args:
            identity_linker: Identity linker
        """
        self.identity_linker = identity_linker

    async def execute(self, request: UnlinkRequest) -> AccountView:
        account_id = (
            AccountId(request.primary_session.id) if request.primary_session else None
        )
        account = await self.identity_linker.unlink(account_id, request.provider)
        return AccountView.from_account(account)
