"""Unit tests for IdentityLinker."""

import pytest

from stagelink.domain.error import LinkPersistFailedError, NotAuthenticatedError
from stagelink.domain.model import Account
from stagelink.domain.service import IdentityLinker
from stagelink.domain.value import AccountId, ProviderKind, Role
from stagelink.persistence.repository.inmemory import InMemoryAccountRepository
from tests.conftest import make_profile


async def seeded_repository(*account_ids: str) -> InMemoryAccountRepository:
    repo = InMemoryAccountRepository()
    for account_id in account_ids:
        await repo.create(Account(id=AccountId(account_id), role=Role.STREAMER))
    return repo


class StaleOwnershipRepository(InMemoryAccountRepository):
    """Shares another repository's accounts but never sees existing owners."""

    def __init__(self, source: InMemoryAccountRepository) -> None:
        super().__init__()
        self._accounts = source._accounts

    async def find_by_linked_identity(self, provider, provider_user_id):
        return None


class TestLink:
    """Tests for IdentityLinker.link()."""

    @pytest.mark.asyncio
    async def test_link_writes_every_field(self):
        # Arrange
        repo = await seeded_repository("user-1")
        linker = IdentityLinker(repo)
        profile = make_profile(
            ProviderKind.TWITTER,
            user_id="99",
            username="bob",
            display_name="Bob",
            avatar_url="https://pbs.twimg.com/bob.png",
        )

        # Act
        account = await linker.link(AccountId("user-1"), ProviderKind.TWITTER, profile)

        # Assert
        linked = account.linked(ProviderKind.TWITTER)
        assert linked.provider_user_id == "99"
        assert linked.username == "bob"
        assert linked.display_name == "Bob"
        assert linked.avatar_url == "https://pbs.twimg.com/bob.png"
        assert linked.linked_at is not None
        assert (await repo.find_by_id(AccountId("user-1"))) == account

    @pytest.mark.asyncio
    async def test_relinking_same_profile_is_idempotent(self):
        repo = await seeded_repository("user-1")
        linker = IdentityLinker(repo)
        profile = make_profile()

        first = await linker.link(AccountId("user-1"), ProviderKind.KICK, profile)
        second = await linker.link(AccountId("user-1"), ProviderKind.KICK, profile)

        assert list(second.linked_identities) == [ProviderKind.KICK]
        assert second.linked(ProviderKind.KICK).provider_user_id == "42"
        assert (
            first.linked(ProviderKind.KICK).username
            == second.linked(ProviderKind.KICK).username
        )

    @pytest.mark.asyncio
    async def test_relinking_overwrites_with_fresh_profile(self):
        repo = await seeded_repository("user-1")
        linker = IdentityLinker(repo)
        await linker.link(AccountId("user-1"), ProviderKind.KICK, make_profile())

        account = await linker.link(
            AccountId("user-1"),
            ProviderKind.KICK,
            make_profile(user_id="43", username="alice2"),
        )

        assert account.linked(ProviderKind.KICK).provider_user_id == "43"
        assert account.linked(ProviderKind.KICK).username == "alice2"

    @pytest.mark.asyncio
    async def test_link_without_account_requires_authentication(self):
        linker = IdentityLinker(InMemoryAccountRepository())

        with pytest.raises(NotAuthenticatedError):
            await linker.link(None, ProviderKind.KICK, make_profile())

    @pytest.mark.asyncio
    async def test_identity_owned_by_another_account_fails_to_persist(self):
        repo = await seeded_repository("user-1", "user-2")
        linker = IdentityLinker(repo)
        await linker.link(AccountId("user-1"), ProviderKind.KICK, make_profile())

        with pytest.raises(LinkPersistFailedError, match="already linked"):
            await linker.link(AccountId("user-2"), ProviderKind.KICK, make_profile())

        assert (await repo.find_by_id(AccountId("user-2"))).linked_identities == {}

    @pytest.mark.asyncio
    async def test_write_rejected_after_ownership_check_fails_to_persist(self):
        # Another request links the identity between the check and the write
        repo = await seeded_repository("user-1", "user-2")
        await IdentityLinker(repo).link(
            AccountId("user-1"), ProviderKind.KICK, make_profile()
        )
        linker = IdentityLinker(StaleOwnershipRepository(repo))

        with pytest.raises(LinkPersistFailedError, match="linked to another account"):
            await linker.link(AccountId("user-2"), ProviderKind.KICK, make_profile())

    @pytest.mark.asyncio
    async def test_missing_account_fails_to_persist(self):
        linker = IdentityLinker(InMemoryAccountRepository())

        with pytest.raises(LinkPersistFailedError):
            await linker.link(AccountId("ghost"), ProviderKind.KICK, make_profile())

    @pytest.mark.asyncio
    async def test_profile_for_other_provider_rejected(self):
        repo = await seeded_repository("user-1")
        linker = IdentityLinker(repo)

        with pytest.raises(LinkPersistFailedError):
            await linker.link(
                AccountId("user-1"), ProviderKind.DISCORD, make_profile(ProviderKind.KICK)
            )


class TestUnlink:
    """Tests for IdentityLinker.unlink()."""

    @pytest.mark.asyncio
    async def test_unlink_clears_only_that_provider(self):
        # Arrange
        repo = await seeded_repository("user-1")
        linker = IdentityLinker(repo)
        await linker.link(AccountId("user-1"), ProviderKind.KICK, make_profile())
        await linker.link(
            AccountId("user-1"),
            ProviderKind.DISCORD,
            make_profile(ProviderKind.DISCORD, user_id="7", username="carol"),
        )

        # Act
        account = await linker.unlink(AccountId("user-1"), ProviderKind.KICK)

        # Assert
        assert not account.is_linked(ProviderKind.KICK)
        assert account.linked(ProviderKind.DISCORD).username == "carol"
        assert account.role is Role.STREAMER

    @pytest.mark.asyncio
    async def test_link_then_unlink_restores_empty_links(self):
        repo = await seeded_repository("user-1")
        linker = IdentityLinker(repo)
        before = await repo.find_by_id(AccountId("user-1"))

        profile = make_profile(ProviderKind.TWITTER, user_id="99", username="bob")
        await linker.link(AccountId("user-1"), ProviderKind.TWITTER, profile)
        after = await linker.unlink(AccountId("user-1"), ProviderKind.TWITTER)

        assert after.linked_identities == before.linked_identities
        assert after.role == before.role

    @pytest.mark.asyncio
    async def test_unlink_without_account_requires_authentication(self):
        linker = IdentityLinker(InMemoryAccountRepository())

        with pytest.raises(NotAuthenticatedError):
            await linker.unlink(None, ProviderKind.KICK)

    @pytest.mark.asyncio
    async def test_unlink_missing_account_fails_to_persist(self):
        linker = IdentityLinker(InMemoryAccountRepository())

        with pytest.raises(LinkPersistFailedError):
            await linker.unlink(AccountId("ghost"), ProviderKind.KICK)
