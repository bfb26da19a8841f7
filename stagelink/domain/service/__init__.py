"""Domain services for Stagelink."""

from stagelink.domain.service.access_evaluator import AccessEvaluator
from stagelink.domain.service.account_service import AccountService
from stagelink.domain.service.identity_linker import IdentityLinker
from stagelink.domain.service.identity_resolver import (
    HybridIdentityResolver,
    resolve_session_identity,
)
from stagelink.domain.service.jwt_service import JWTService
from stagelink.domain.service.oauth_state_guard import OAuthStateGuard
from stagelink.domain.service.risk_intake import ReputationLookup, RiskIntake
from stagelink.domain.service.token_exchange import TokenExchanger

__all__ = [
    "AccessEvaluator",
    "AccountService",
    "HybridIdentityResolver",
    "IdentityLinker",
    "JWTService",
    "OAuthStateGuard",
    "ReputationLookup",
    "RiskIntake",
    "TokenExchanger",
    "resolve_session_identity",
]
