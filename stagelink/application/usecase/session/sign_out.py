"""Sign out use case."""

from pydantic import BaseModel

from stagelink.domain.service import HybridIdentityResolver

from ..base import BaseUseCase


class SignOutRequest(BaseModel):
    """Sign out of the secondary session for a client context."""

    client_context: str | None = None


class SignOutUseCase(BaseUseCase):
    """Clears the secondary sign-in record.

    The primary session cookie is cleared by the route.
    """

    def __init__(self, identity_resolver: HybridIdentityResolver) -> None:
        """Initialize sign out use case.

        Args:
            identity_resolver: Hybrid identity resolver
        """
        self.identity_resolver = identity_resolver

    async def execute(self, request: SignOutRequest) -> None:
        if request.client_context:
            await self.identity_resolver.forget_secondary(request.client_context)
