"""Per-provider OAuth endpoints and profile normalizers.

Each provider differs only in its endpoints, how the client authenticates at
the token endpoint, and the shape of its profile response. Everything else
in the exchange is shared.
"""

from typing import Any, Callable
from urllib.parse import quote, urlencode

from pydantic import BaseModel, ConfigDict

from stagelink.adapter.error import ProviderError
from stagelink.domain.value import ExternalProfile, ProviderKind


class ProviderEndpoints(BaseModel):
    """Static OAuth configuration for one provider."""

    model_config = ConfigDict(frozen=True)

    authorize_url: str
    token_url: str
    profile_url: str
    profile_params: dict[str, str] = {}
    pkce_required: bool = True
    # Twitter requires client credentials as HTTP Basic; others take them in the form
    basic_auth: bool = False


ENDPOINTS: dict[ProviderKind, ProviderEndpoints] = {
    ProviderKind.KICK: ProviderEndpoints(
        authorize_url="https://id.kick.com/oauth/authorize",
        token_url="https://id.kick.com/oauth/token",
        profile_url="https://api.kick.com/public/v1/users",
    ),
    ProviderKind.TWITTER: ProviderEndpoints(
        authorize_url="https://twitter.com/i/oauth2/authorize",
        token_url="https://api.twitter.com/2/oauth2/token",
        profile_url="https://api.twitter.com/2/users/me",
        profile_params={"user.fields": "id,name,username,profile_image_url"},
        basic_auth=True,
    ),
    ProviderKind.DISCORD: ProviderEndpoints(
        authorize_url="https://discord.com/api/oauth2/authorize",
        token_url="https://discord.com/api/oauth2/token",
        profile_url="https://discord.com/api/users/@me",
        pkce_required=False,
    ),
}


def build_authorization_url(
    endpoints: ProviderEndpoints,
    client_id: str,
    redirect_uri: str,
    state: str,
    scopes: str,
    code_challenge: str | None = None,
) -> str:
    """Authorization URL for one attempt."""
    params = {
        "response_type": "code",
        "client_id": client_id,
        "redirect_uri": redirect_uri,
        "scope": scopes,
        "state": state,
    }
    if code_challenge is not None:
        params["code_challenge"] = code_challenge
        params["code_challenge_method"] = "S256"
    return f"{endpoints.authorize_url}?{urlencode(params, quote_via=quote)}"


def kick_avatar_fallback(username: str) -> str:
    """Public Kick avatar URL for a username."""
    return (
        f"https://files.kick.com/images/user/{username}"
        "/profile_image/conversion/300x300-medium.webp"
    )


def initials_avatar(username: str) -> str:
    """Generated initials avatar in Discord colours."""
    params = urlencode(
        {
            "name": username,
            "background": "5865F2",
            "color": "fff",
            "size": "200",
            "bold": "true",
        }
    )
    return f"https://ui-avatars.com/api/?{params}"


def _str_or_none(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def normalize_kick(body: Any) -> ExternalProfile:
    """Kick returns ``{"data": [{user_id, name, profile_picture, ...}]}``."""
    try:
        user = body["data"][0]
        user_id = str(user["user_id"])
        username = user["name"]
    except (KeyError, IndexError, TypeError) as e:
        raise ProviderError(f"Unexpected Kick profile response: {e}") from e

    return ExternalProfile(
        provider=ProviderKind.KICK,
        id=user_id,
        username=username,
        display_name=username,
        avatar_url=_str_or_none(user.get("profile_picture"))
        or kick_avatar_fallback(username),
    )


def normalize_twitter(body: Any) -> ExternalProfile:
    """Twitter returns ``{"data": {id, username, name, profile_image_url}}``."""
    try:
        user = body["data"]
        user_id = str(user["id"])
        username = user["username"]
    except (KeyError, TypeError) as e:
        raise ProviderError(f"Unexpected Twitter profile response: {e}") from e

    return ExternalProfile(
        provider=ProviderKind.TWITTER,
        id=user_id,
        username=username,
        display_name=_str_or_none(user.get("name")),
        avatar_url=_str_or_none(user.get("profile_image_url")),
    )


def normalize_discord(body: Any) -> ExternalProfile:
    """Discord returns ``{id, username, global_name, avatar}`` at the top level."""
    try:
        user_id = str(body["id"])
        username = body["username"]
    except (KeyError, TypeError) as e:
        raise ProviderError(f"Unexpected Discord profile response: {e}") from e

    avatar_hash = _str_or_none(body.get("avatar"))
    if avatar_hash:
        avatar_url = f"https://cdn.discordapp.com/avatars/{user_id}/{avatar_hash}.png"
    else:
        avatar_url = initials_avatar(username)

    return ExternalProfile(
        provider=ProviderKind.DISCORD,
        id=user_id,
        username=username,
        display_name=_str_or_none(body.get("global_name")) or username,
        avatar_url=avatar_url,
    )


NORMALIZERS: dict[ProviderKind, Callable[[Any], ExternalProfile]] = {
    ProviderKind.KICK: normalize_kick,
    ProviderKind.TWITTER: normalize_twitter,
    ProviderKind.DISCORD: normalize_discord,
}
