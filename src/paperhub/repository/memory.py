"""In-process authoritative stores for accounts and papers.

These back the web service and double as the reference implementation of
the repository contracts in tests. All state lives in dictionaries owned by
the instances; callers only ever receive copies.
"""

from __future__ import annotations

import hashlib
import hmac
import os
from datetime import datetime, timezone
from itertools import count
from typing import Callable, Dict, List, Optional

from pydantic import BaseModel

from ..core.errors import AlreadyPublishedError, AuthError, NotFoundError, ValidationError
from ..core.models import EMAIL_PATTERN, Identity, Paper, PaperDraft, Role
from ..utils.logging import get_logger
from .base import AuthGateway, PaperRepository

logger = get_logger(__name__)

PBKDF2_ITERATIONS = 100_000


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def hash_password(password: str, salt: Optional[bytes] = None) -> str:
    """Salted PBKDF2-SHA256 hash encoded as ``salt$digest`` (hex)."""
    salt = salt or os.urandom(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt, PBKDF2_ITERATIONS)
    return f"{salt.hex()}${digest.hex()}"


def verify_password(password: str, encoded: str) -> bool:
    salt_hex, _, _ = encoded.partition("$")
    candidate = hash_password(password, bytes.fromhex(salt_hex))
    return hmac.compare_digest(candidate, encoded)


class UserAccount(BaseModel):
    username: str
    email: str
    password_hash: str
    role: Role
    created_at: datetime

    def identity(self) -> Identity:
        return Identity(username=self.username, email=self.email, role=self.role)


class InMemoryUserDirectory(AuthGateway):
    """Registered accounts keyed by username."""

    def __init__(self) -> None:
        self._accounts: Dict[str, UserAccount] = {}

    def _check_registration(self, username: str, email: str, password: str) -> None:
        if not 3 <= len(username) <= 20:
            raise ValidationError("Error: Username must be between 3 and 20 characters!")
        if len(email) > 50 or not EMAIL_PATTERN.match(email):
            raise ValidationError("Error: Email address is invalid!")
        if not 6 <= len(password) <= 40:
            raise ValidationError("Error: Password must be between 6 and 40 characters!")

    async def signup(self, username: str, email: str, password: str, role: str) -> str:
        self.register(username, email, password, role)
        return "User registered successfully!"

    def register(self, username: str, email: str, password: str, role: str) -> UserAccount:
        """Validate and store a new account."""
        username = (username or "").strip()
        email = (email or "").strip()
        password = password or ""
        self._check_registration(username, email, password)
        parsed = Role.parse(role)
        if parsed is None:
            raise ValidationError(f"Error: Invalid role '{role}'!")
        if username in self._accounts:
            logger.warning(f"Signup failed: username '{username}' already exists")
            raise AuthError("Error: Username is already taken!", status_code=409)
        if any(a.email.lower() == email.lower() for a in self._accounts.values()):
            logger.warning(f"Signup failed: email '{email}' already exists")
            raise AuthError("Error: Email is already in use!", status_code=409)
        account = UserAccount(
            username=username,
            email=email,
            password_hash=hash_password(password),
            role=parsed,
            created_at=_utcnow(),
        )
        self._accounts[username] = account
        logger.info("User registered", extra={"username": username, "role": parsed.value})
        return account

    async def login(self, username: str, password: str) -> Identity:
        account = self._accounts.get((username or "").strip())
        if account is None or not verify_password(password or "", account.password_hash):
            logger.warning(f"Login failed for username: {username}")
            raise AuthError("Error: Invalid username or password!")
        logger.info("Login successful", extra={"username": account.username, "role": account.role.value})
        return account.identity()

    def role_of(self, username: str) -> Optional[Role]:
        account = self._accounts.get(username)
        return account.role if account else None

    def exists(self, username: str) -> bool:
        return username in self._accounts

    def __len__(self) -> int:
        return len(self._accounts)


class InMemoryPaperRepository(PaperRepository):
    """Paper records keyed by id; role checks go through the user directory."""

    def __init__(
        self,
        users: InMemoryUserDirectory,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.users = users
        self.clock = clock
        self._papers: Dict[int, Paper] = {}
        self._ids = count(1)

    def _require_role(self, username: str, role: Role, message: str) -> None:
        actual = self.users.role_of(username)
        if actual is not role:
            logger.warning(
                f"Denied: user '{username}' has role {actual.value if actual else None}, needs {role.value}"
            )
            raise AuthError(message, status_code=403)

    @staticmethod
    def _newest_first(papers: List[Paper]) -> List[Paper]:
        return sorted(papers, key=lambda p: (p.created_at, p.id), reverse=True)

    def _snapshot(self, papers: List[Paper]) -> List[Paper]:
        return [p.model_copy(deep=True) for p in self._newest_first(papers)]

    async def create_paper(self, draft: PaperDraft, author_username: str) -> Paper:
        draft.ensure_complete()
        self._require_role(author_username, Role.AUTHOR, "Error: Only authors can create papers!")
        paper = Paper(
            id=next(self._ids),
            title=draft.title.strip(),
            abstract=draft.abstract.strip(),
            content=draft.content,
            author_username=author_username,
            tags=list(draft.tags),
            created_at=self.clock(),
        )
        self._papers[paper.id] = paper
        logger.info("Paper created", extra={"paper_id": paper.id, "title": paper.title, "author": author_username})
        return paper.model_copy(deep=True)

    async def list_papers_by_author(self, username: str) -> List[Paper]:
        return self._snapshot([p for p in self._papers.values() if p.author_username == username])

    async def list_all_papers(self) -> List[Paper]:
        return self._snapshot(list(self._papers.values()))

    async def list_unpublished_papers(self) -> List[Paper]:
        return self._snapshot([p for p in self._papers.values() if not p.published])

    async def list_published_papers(self) -> List[Paper]:
        published = [p for p in self._papers.values() if p.published]
        published.sort(key=lambda p: (p.published_at, p.id), reverse=True)
        return [p.model_copy(deep=True) for p in published]

    async def list_papers_published_by(self, committee_username: str) -> List[Paper]:
        return self._snapshot(
            [p for p in self._papers.values() if p.published_by_username == committee_username]
        )

    async def search_papers(self, keyword: str) -> List[Paper]:
        keyword = (keyword or "").strip()
        if not keyword:
            return await self.list_all_papers()
        results = self._snapshot([p for p in self._papers.values() if p.matches(keyword)])
        logger.debug("Search completed", extra={"keyword": keyword, "results": len(results)})
        return results

    async def get_paper(self, paper_id: int) -> Paper:
        paper = self._papers.get(paper_id)
        if paper is None:
            raise NotFoundError(f"Error: Paper not found with ID: {paper_id}")
        return paper.model_copy(deep=True)

    async def publish_paper(self, paper_id: int, committee_username: str) -> Paper:
        self._require_role(
            committee_username, Role.COMMITTEE, "Error: Only committee members can publish papers!"
        )
        paper = self._papers.get(paper_id)
        if paper is None:
            raise NotFoundError(f"Error: Paper not found with ID: {paper_id}")
        if paper.published:
            raise AlreadyPublishedError(
                f"Error: Paper {paper_id} was already published by {paper.published_by_username}"
            )
        published = paper.model_copy(
            update={
                "published": True,
                "published_by_username": committee_username,
                "published_at": self.clock(),
            }
        )
        self._papers[paper_id] = published
        logger.info(
            "Paper published",
            extra={"paper_id": paper_id, "title": published.title, "published_by": committee_username},
        )
        return published.model_copy(deep=True)

    def __len__(self) -> int:
        return len(self._papers)


DEMO_PASSWORD = "password"


async def seed_demo_data(users: InMemoryUserDirectory, papers: InMemoryPaperRepository) -> None:
    """Create demo accounts and sample papers when the stores are empty."""
    demo_accounts = [
        ("author1", "author@example.com", Role.AUTHOR),
        ("committee1", "committee@example.com", Role.COMMITTEE),
        ("student1", "student@example.com", Role.STUDENT),
    ]
    for username, email, role in demo_accounts:
        if not users.exists(username):
            users.register(username, email, DEMO_PASSWORD, role.value)
    if len(papers) == 0:
        first = await papers.create_paper(
            PaperDraft.from_form(
                title="Introduction to Machine Learning",
                abstract="A comprehensive introduction to machine learning concepts and algorithms.",
                content="Machine learning is a subset of artificial intelligence...",
                raw_tags="machine learning, AI, algorithms",
            ),
            "author1",
        )
        await papers.create_paper(
            PaperDraft.from_form(
                title="Advances in Data Structures",
                abstract="A survey of recent work on cache-efficient data structures.",
                content="Data structures determine how efficiently programs run...",
                raw_tags="data structures, algorithms",
            ),
            "author1",
        )
        await papers.publish_paper(first.id, "committee1")
    logger.info("Demo data ready", extra={"users": len(users), "papers": len(papers)})
