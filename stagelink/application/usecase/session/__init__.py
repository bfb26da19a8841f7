"""Session and access use cases."""

from .get_access import AccessSummary, GetAccessUseCase
from .resolve_session import ResolveSessionUseCase
from .sign_out import SignOutUseCase
from .track_login import TrackLoginUseCase

__all__ = [
    "AccessSummary",
    "GetAccessUseCase",
    "ResolveSessionUseCase",
    "SignOutUseCase",
    "TrackLoginUseCase",
]
