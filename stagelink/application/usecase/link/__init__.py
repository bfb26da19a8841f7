"""Provider linking and sign-in use cases."""

from .begin_authorization import BeginAuthorizationUseCase
from .complete_authorization import CompleteAuthorizationUseCase
from .unlink import UnlinkUseCase

__all__ = [
    "BeginAuthorizationUseCase",
    "CompleteAuthorizationUseCase",
    "UnlinkUseCase",
]
