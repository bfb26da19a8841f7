"""Identity linker domain service."""

from typing import Optional

import logfire

from stagelink.domain.error import (
    LinkPersistFailedError,
    NotAuthenticatedError,
    RepositoryWriteError,
)
from stagelink.domain.model.account import Account, LinkedIdentity
from stagelink.domain.repository.account import AccountRepository
from stagelink.domain.value import AccountId, ExternalProfile, ProviderKind

from .base import Service


class IdentityLinker(Service):
    """Writes and clears provider links on an account.

    Each call is a single repository write covering every field of one
    provider kind. Nothing is retried here; callers surface failures.
    """

    def __init__(self, account_repository: AccountRepository) -> None:
        """Initialize identity linker.

        Args:
            account_repository: Account repository
        """
        self.account_repository = account_repository

    async def link(
        self,
        account_id: Optional[AccountId],
        provider: ProviderKind,
        profile: ExternalProfile,
    ) -> Account:
        """Link an exchanged profile to the signed-in account.

        Re-linking overwrites the existing link for the provider kind with
        the fresh profile fields.

        Args:
            account_id: Primary account id (None when not signed in)
            provider: Provider kind being linked
            profile: Normalized profile from the token exchange

        Returns:
            The account after the write

        Raises:
            NotAuthenticatedError: No primary account
            LinkPersistFailedError: The write was rejected
        """
        if account_id is None:
            raise NotAuthenticatedError(
                f"Sign in before linking a {provider.display_name} account"
            )

        if profile.provider != provider:
            raise LinkPersistFailedError(
                provider.display_name,
                f"profile belongs to {profile.provider.display_name}",
            )

        with logfire.span(
            "identity_linker.link",
            account_id=account_id,
            provider=provider.value,
            provider_user_id=profile.id,
        ):
            owner = await self.account_repository.find_by_linked_identity(
                provider, profile.id
            )
            if owner is not None and owner.id != account_id:
                logfire.warn(
                    "Identity already linked elsewhere",
                    account_id=account_id,
                    provider=provider.value,
                    provider_user_id=profile.id,
                )
                raise LinkPersistFailedError(
                    provider.display_name, "already linked to another account"
                )

            identity = LinkedIdentity.from_profile(profile)
            try:
                account = await self.account_repository.set_link(
                    account_id, provider, identity
                )
            except RepositoryWriteError as e:
                logfire.error(
                    "Link write rejected",
                    account_id=account_id,
                    provider=provider.value,
                    error=str(e),
                )
                raise LinkPersistFailedError(provider.display_name, str(e)) from e

            if account is None:
                raise LinkPersistFailedError(
                    provider.display_name, f"account {account_id} does not exist"
                )

            logfire.info(
                "Provider identity linked",
                account_id=account_id,
                provider=provider.value,
                username=identity.username,
            )
            return account

    async def unlink(
        self, account_id: Optional[AccountId], provider: ProviderKind
    ) -> Account:
        """Clear the link for one provider kind.

        Other provider links and the role are left untouched.

        Raises:
            NotAuthenticatedError: No primary account
            LinkPersistFailedError: The write was rejected
        """
        if account_id is None:
            raise NotAuthenticatedError()

        with logfire.span(
            "identity_linker.unlink", account_id=account_id, provider=provider.value
        ):
            try:
                account = await self.account_repository.clear_link(account_id, provider)
            except RepositoryWriteError as e:
                logfire.error(
                    "Unlink write rejected",
                    account_id=account_id,
                    provider=provider.value,
                    error=str(e),
                )
                raise LinkPersistFailedError(provider.display_name, str(e)) from e

            if account is None:
                raise LinkPersistFailedError(
                    provider.display_name, f"account {account_id} does not exist"
                )

            logfire.info(
                "Provider identity unlinked",
                account_id=account_id,
                provider=provider.value,
            )
            return account
