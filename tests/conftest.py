"""Test configuration and fixtures."""

import logfire
import pytest

from stagelink.domain.value import ExternalProfile, ProviderKind

# Keep telemetry local; spans still run so instrumented code paths execute
logfire.configure(send_to_logfire=False, console=False)


def make_profile(
    provider: ProviderKind = ProviderKind.KICK,
    user_id: str = "42",
    username: str = "alice",
    **overrides,
) -> ExternalProfile:
    """Helper for building normalized provider profiles in tests."""
    return ExternalProfile(
        provider=provider,
        id=user_id,
        username=username,
        display_name=overrides.pop("display_name", username),
        avatar_url=overrides.pop("avatar_url", None),
        **overrides,
    )


@pytest.fixture
def kick_profile() -> ExternalProfile:
    """Kick profile of the sample viewer."""
    return make_profile()
