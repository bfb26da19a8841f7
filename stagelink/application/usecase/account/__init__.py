"""Account use cases."""

from .get_account import GetAccountUseCase
from .view import AccountView, LinkedIdentityView

__all__ = ["AccountView", "GetAccountUseCase", "LinkedIdentityView"]
