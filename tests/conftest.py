"""Shared fixtures for the PaperHub test-suite."""

import os
import tempfile
from typing import List

# Keep sessions and logs of the suite away from the user's home directory.
os.environ.setdefault("PAPERHUB_SESSION_DIR", tempfile.mkdtemp(prefix="paperhub-test-"))
os.environ.setdefault("PAPERHUB_LOG_FORMAT", "text")
os.environ.setdefault("PAPERHUB_LOG_LEVEL", "WARNING")

import pytest

from paperhub.core.models import Identity, Paper, PaperDraft, Role
from paperhub.repository.base import AuthGateway, PaperRepository
from paperhub.repository.memory import InMemoryPaperRepository, InMemoryUserDirectory
from paperhub.session.storage import MemoryStorage
from paperhub.session.store import SessionStore

PASSWORD = "secret123"


class RecordingBackend(PaperRepository, AuthGateway):
    """Delegates to the in-memory stores and records every call made."""

    def __init__(self, users: InMemoryUserDirectory, papers: InMemoryPaperRepository) -> None:
        self.users = users
        self.papers = papers
        self.calls: List[str] = []

    async def login(self, username: str, password: str) -> Identity:
        self.calls.append("login")
        return await self.users.login(username, password)

    async def signup(self, username: str, email: str, password: str, role: str) -> str:
        self.calls.append("signup")
        return await self.users.signup(username, email, password, role)

    async def create_paper(self, draft: PaperDraft, author_username: str) -> Paper:
        self.calls.append("create_paper")
        return await self.papers.create_paper(draft, author_username)

    async def list_papers_by_author(self, username: str) -> List[Paper]:
        self.calls.append("list_papers_by_author")
        return await self.papers.list_papers_by_author(username)

    async def list_all_papers(self) -> List[Paper]:
        self.calls.append("list_all_papers")
        return await self.papers.list_all_papers()

    async def list_unpublished_papers(self) -> List[Paper]:
        self.calls.append("list_unpublished_papers")
        return await self.papers.list_unpublished_papers()

    async def list_published_papers(self) -> List[Paper]:
        self.calls.append("list_published_papers")
        return await self.papers.list_published_papers()

    async def list_papers_published_by(self, committee_username: str) -> List[Paper]:
        self.calls.append("list_papers_published_by")
        return await self.papers.list_papers_published_by(committee_username)

    async def search_papers(self, keyword: str) -> List[Paper]:
        self.calls.append("search_papers")
        return await self.papers.search_papers(keyword)

    async def get_paper(self, paper_id: int) -> Paper:
        self.calls.append("get_paper")
        return await self.papers.get_paper(paper_id)

    async def publish_paper(self, paper_id: int, committee_username: str) -> Paper:
        self.calls.append("publish_paper")
        return await self.papers.publish_paper(paper_id, committee_username)


def register_accounts(users: InMemoryUserDirectory) -> None:
    users.register("alice", "alice@example.com", PASSWORD, Role.AUTHOR.value)
    users.register("bob", "bob@example.com", PASSWORD, Role.AUTHOR.value)
    users.register("carol", "carol@example.com", PASSWORD, Role.COMMITTEE.value)
    users.register("dave", "dave@example.com", PASSWORD, Role.STUDENT.value)


@pytest.fixture
def users() -> InMemoryUserDirectory:
    directory = InMemoryUserDirectory()
    register_accounts(directory)
    return directory


@pytest.fixture
def papers(users) -> InMemoryPaperRepository:
    return InMemoryPaperRepository(users)


@pytest.fixture
def backend(users, papers) -> RecordingBackend:
    return RecordingBackend(users, papers)


@pytest.fixture
def session() -> SessionStore:
    return SessionStore(MemoryStorage())


def identity(username: str, role: Role) -> Identity:
    return Identity(username=username, email=f"{username}@example.com", role=role)
