"""Admin authorization check shared by admin use cases."""

import logfire

from stagelink.domain.error import NotAuthorizedError
from stagelink.domain.service import AccessEvaluator
from stagelink.domain.value import PrimarySession, SessionIdentity, can_access_admin_panel


async def require_admin(
    access_evaluator: AccessEvaluator,
    primary_session: PrimarySession | None,
    operation: str,
) -> SessionIdentity:
    """Return the caller's identity if its role is exactly admin.

    Raises:
        NotAuthorizedError: Anyone else, including anonymous callers
    """
    identity = SessionIdentity.primary(primary_session.id) if primary_session else None
    role = await access_evaluator.get_role(identity)
    if identity is None or not can_access_admin_panel(role):
        logfire.warn(
            "Admin operation denied",
            operation=operation,
            identity_id=identity.id if identity else None,
            role=role.value,
        )
        raise NotAuthorizedError(operation, identity.id if identity else None)
    return identity
