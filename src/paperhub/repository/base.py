"""Abstract contracts of the remote paper and auth service."""

from abc import ABC, abstractmethod
from typing import List

from ..core.models import Identity, Paper, PaperDraft


class PaperRepository(ABC):
    """Asynchronous boundary to the authoritative paper store.

    Implementations own the paper records; callers treat every returned list
    as a read-only projection and re-query after each mutation.
    """

    @abstractmethod
    async def create_paper(self, draft: PaperDraft, author_username: str) -> Paper:
        """
        Store a new unpublished paper.

        Raises:
            ValidationError: title or abstract is blank
            AuthError: author_username is not an existing AUTHOR
        """
        raise NotImplementedError

    @abstractmethod
    async def list_papers_by_author(self, username: str) -> List[Paper]:
        raise NotImplementedError

    @abstractmethod
    async def list_all_papers(self) -> List[Paper]:
        """Every paper regardless of status, newest first."""
        raise NotImplementedError

    @abstractmethod
    async def list_unpublished_papers(self) -> List[Paper]:
        raise NotImplementedError

    @abstractmethod
    async def list_published_papers(self) -> List[Paper]:
        raise NotImplementedError

    @abstractmethod
    async def list_papers_published_by(self, committee_username: str) -> List[Paper]:
        raise NotImplementedError

    @abstractmethod
    async def search_papers(self, keyword: str) -> List[Paper]:
        """
        Case-insensitive substring search over title, abstract and tags.

        A blank keyword returns the same set as :meth:`list_all_papers`.
        """
        raise NotImplementedError

    @abstractmethod
    async def get_paper(self, paper_id: int) -> Paper:
        raise NotImplementedError

    @abstractmethod
    async def publish_paper(self, paper_id: int, committee_username: str) -> Paper:
        """
        Mark a paper as published by a committee member.

        Raises:
            AuthError: committee_username is not an existing COMMITTEE member
            NotFoundError: no paper with that id
            AlreadyPublishedError: the paper was published before
        """
        raise NotImplementedError

    async def close(self) -> None:
        """Clean up resources."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}>"


class AuthGateway(ABC):
    """Asynchronous boundary to account registration and login."""

    @abstractmethod
    async def login(self, username: str, password: str) -> Identity:
        """Return the identity for valid credentials or raise AuthError."""
        raise NotImplementedError

    @abstractmethod
    async def signup(self, username: str, email: str, password: str, role: str) -> str:
        """Register an account and return the confirmation message."""
        raise NotImplementedError
