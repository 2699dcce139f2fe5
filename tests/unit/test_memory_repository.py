"""Tests for the in-memory account directory and paper repository."""

import pytest

from paperhub.core.errors import AlreadyPublishedError, AuthError, NotFoundError, ValidationError
from paperhub.core.models import PaperDraft
from paperhub.repository.memory import (
    InMemoryPaperRepository,
    InMemoryUserDirectory,
    hash_password,
    seed_demo_data,
    verify_password,
)
from tests.conftest import PASSWORD


def _draft(title: str = "Graph Neural Networks", abstract: str = "A survey.", tags: str = "gnn, ml") -> PaperDraft:
    return PaperDraft.from_form(title, abstract, "content", tags)


def test_password_hashing() -> None:
    encoded = hash_password("secret123")
    assert "secret123" not in encoded
    assert verify_password("secret123", encoded)
    assert not verify_password("secret124", encoded)
    assert hash_password("secret123") != encoded


class TestUserDirectory:
    @pytest.mark.asyncio
    async def test_login_returns_identity(self, users: InMemoryUserDirectory) -> None:
        user = await users.login("alice", PASSWORD)
        assert user.username == "alice"
        assert user.email == "alice@example.com"
        assert user.role == "AUTHOR"

    @pytest.mark.asyncio
    async def test_login_rejects_bad_password(self, users) -> None:
        with pytest.raises(AuthError, match="Invalid username or password"):
            await users.login("alice", "wrong-password")

    @pytest.mark.asyncio
    async def test_login_rejects_unknown_user(self, users) -> None:
        with pytest.raises(AuthError):
            await users.login("nobody", PASSWORD)

    @pytest.mark.asyncio
    async def test_duplicate_username(self, users) -> None:
        with pytest.raises(AuthError, match="Username is already taken"):
            await users.signup("alice", "other@example.com", PASSWORD, "STUDENT")

    @pytest.mark.asyncio
    async def test_duplicate_email(self, users) -> None:
        with pytest.raises(AuthError, match="Email is already in use"):
            await users.signup("alice2", "ALICE@example.com", PASSWORD, "STUDENT")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "username,email,password,role",
        [
            ("ab", "ab@example.com", PASSWORD, "STUDENT"),
            ("x" * 21, "x@example.com", PASSWORD, "STUDENT"),
            ("erin", "not-an-email", PASSWORD, "STUDENT"),
            ("erin", "erin@example.com", "12345", "STUDENT"),
            ("erin", "erin@example.com", PASSWORD, "ADMIN"),
        ],
    )
    async def test_signup_constraints(self, users, username, email, password, role) -> None:
        with pytest.raises(ValidationError):
            await users.signup(username, email, password, role)
        assert not users.exists(username)

    @pytest.mark.asyncio
    async def test_signup_message(self) -> None:
        directory = InMemoryUserDirectory()
        message = await directory.signup("erin", "erin@example.com", PASSWORD, "committee")
        assert message == "User registered successfully!"
        assert directory.role_of("erin").value == "COMMITTEE"

    @pytest.mark.asyncio
    async def test_password_whitespace_is_significant(self) -> None:
        directory = InMemoryUserDirectory()
        await directory.signup("erin", "erin@example.com", "   abc ", "STUDENT")

        assert (await directory.login("erin", "   abc ")).username == "erin"
        with pytest.raises(AuthError):
            await directory.login("erin", "abc")

    @pytest.mark.asyncio
    async def test_password_length_counts_whitespace(self) -> None:
        directory = InMemoryUserDirectory()
        await directory.signup("erin", "erin@example.com", "  abcd", "STUDENT")
        assert directory.exists("erin")


class TestPaperRepository:
    @pytest.mark.asyncio
    async def test_create_then_list_by_author(self, papers: InMemoryPaperRepository) -> None:
        created = await papers.create_paper(_draft(), "alice")
        assert created.id is not None
        assert created.published is False
        assert created.author_username == "alice"
        assert created.tags == ["gnn", "ml"]
        assert created.created_at.tzinfo is not None

        mine = await papers.list_papers_by_author("alice")
        assert [(p.title, p.abstract, p.published) for p in mine] == [
            ("Graph Neural Networks", "A survey.", False)
        ]
        assert await papers.list_papers_by_author("bob") == []

    @pytest.mark.asyncio
    async def test_create_requires_author_role(self, papers) -> None:
        for username in ("carol", "dave", "nobody"):
            with pytest.raises(AuthError, match="Only authors can create papers"):
                await papers.create_paper(_draft(), username)
        assert len(papers) == 0

    @pytest.mark.asyncio
    async def test_create_rejects_blank_fields(self, papers) -> None:
        with pytest.raises(ValidationError):
            await papers.create_paper(PaperDraft(title=" ", abstract="x"), "alice")
        with pytest.raises(ValidationError):
            await papers.create_paper(PaperDraft(title="x", abstract=""), "alice")
        assert len(papers) == 0

    @pytest.mark.asyncio
    async def test_list_all_is_newest_first(self, papers) -> None:
        first = await papers.create_paper(_draft("First"), "alice")
        second = await papers.create_paper(_draft("Second"), "bob")
        assert [p.id for p in await papers.list_all_papers()] == [second.id, first.id]

    @pytest.mark.asyncio
    async def test_publish_lifecycle(self, papers) -> None:
        paper = await papers.create_paper(_draft(), "alice")
        assert [p.id for p in await papers.list_unpublished_papers()] == [paper.id]

        published = await papers.publish_paper(paper.id, "carol")
        assert published.published is True
        assert published.published_by_username == "carol"
        assert published.published_at is not None

        assert await papers.list_unpublished_papers() == []
        assert [p.id for p in await papers.list_published_papers()] == [paper.id]
        assert [p.id for p in await papers.list_papers_published_by("carol")] == [paper.id]
        assert (await papers.get_paper(paper.id)).published

    @pytest.mark.asyncio
    async def test_second_publish_fails_and_keeps_publisher(self, papers, users) -> None:
        await users.signup("frank", "frank@example.com", PASSWORD, "COMMITTEE")
        paper = await papers.create_paper(_draft(), "alice")
        await papers.publish_paper(paper.id, "carol")

        with pytest.raises(AlreadyPublishedError):
            await papers.publish_paper(paper.id, "frank")

        assert (await papers.get_paper(paper.id)).published_by_username == "carol"

    @pytest.mark.asyncio
    async def test_publish_unknown_paper(self, papers) -> None:
        with pytest.raises(NotFoundError):
            await papers.publish_paper(999, "carol")

    @pytest.mark.asyncio
    async def test_publish_requires_committee(self, papers) -> None:
        paper = await papers.create_paper(_draft(), "alice")
        with pytest.raises(AuthError, match="Only committee members"):
            await papers.publish_paper(paper.id, "alice")
        assert not (await papers.get_paper(paper.id)).published

    @pytest.mark.asyncio
    async def test_get_unknown_paper(self, papers) -> None:
        with pytest.raises(NotFoundError):
            await papers.get_paper(42)

    @pytest.mark.asyncio
    async def test_search(self, papers) -> None:
        gnn = await papers.create_paper(_draft("Graph Neural Networks", "Message passing.", "gnn"), "alice")
        rl = await papers.create_paper(_draft("Policy Gradients", "Reinforcement learning.", "rl, GRAPH"), "bob")
        await papers.create_paper(_draft("Compilers", "Parsing text.", "pl"), "bob")

        assert {p.id for p in await papers.search_papers("graph")} == {gnn.id, rl.id}
        assert {p.id for p in await papers.search_papers("REINFORCEMENT")} == {rl.id}
        assert await papers.search_papers("quantum") == []

    @pytest.mark.asyncio
    async def test_blank_search_equals_list_all(self, papers) -> None:
        first = await papers.create_paper(_draft("A"), "alice")
        await papers.create_paper(_draft("B"), "bob")
        await papers.publish_paper(first.id, "carol")

        everything = {p.id for p in await papers.list_all_papers()}
        assert {p.id for p in await papers.search_papers("")} == everything
        assert {p.id for p in await papers.search_papers("   ")} == everything

    @pytest.mark.asyncio
    async def test_returned_records_are_copies(self, papers) -> None:
        paper = await papers.create_paper(_draft(), "alice")
        paper.tags.append("tampered")
        listed = await papers.list_all_papers()
        listed[0].title = "changed"
        stored = await papers.get_paper(paper.id)
        assert stored.tags == ["gnn", "ml"]
        assert stored.title == "Graph Neural Networks"


@pytest.mark.asyncio
async def test_seed_demo_data_is_idempotent() -> None:
    directory = InMemoryUserDirectory()
    repository = InMemoryPaperRepository(directory)
    await seed_demo_data(directory, repository)
    await seed_demo_data(directory, repository)

    assert len(directory) == 3
    assert len(repository) == 2
    assert len(await repository.list_published_papers()) == 1
    assert (await directory.login("committee1", "password")).role == "COMMITTEE"
