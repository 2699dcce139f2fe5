"""API routes of the paper service.

Accounts live under ``/api/auth`` and papers under ``/api/papers``. Role
checks happen in the repository, so these handlers stay thin: parse the
request, call the store, return the record. Failures are rendered by the
exception handlers registered in :mod:`paperhub.web.app`.
"""

from __future__ import annotations

from typing import Dict, List

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field

from ..core.models import Identity, Paper, PaperDraft
from ..repository.memory import InMemoryPaperRepository, InMemoryUserDirectory
from ..utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


class SignupRequest(BaseModel):
    username: str
    email: str
    password: str
    role: str


class LoginRequest(BaseModel):
    username: str
    password: str


class PaperRequest(BaseModel):
    """Paper creation payload."""

    title: str = Field(..., max_length=200)
    abstract: str
    content: str = ""
    tags: List[str] = Field(default_factory=list)


def get_users(request: Request) -> InMemoryUserDirectory:
    return request.app.state.users


def get_papers(request: Request) -> InMemoryPaperRepository:
    return request.app.state.papers


@router.post("/api/auth/signup")
async def signup(
    body: SignupRequest,
    users: InMemoryUserDirectory = Depends(get_users),
) -> Dict[str, str]:
    logger.info(f"Registration attempt for username: {body.username}, role: {body.role}")
    message = await users.signup(body.username, body.email, body.password, body.role)
    return {"message": message}


@router.post("/api/auth/login", response_model=Identity)
async def login(
    body: LoginRequest,
    users: InMemoryUserDirectory = Depends(get_users),
) -> Identity:
    logger.info(f"Login attempt for username: {body.username}")
    return await users.login(body.username, body.password)


@router.post("/api/papers/create", response_model=Paper)
async def create_paper(
    body: PaperRequest,
    author_username: str,
    papers: InMemoryPaperRepository = Depends(get_papers),
) -> Paper:
    draft = PaperDraft(title=body.title, abstract=body.abstract, content=body.content, tags=body.tags)
    return await papers.create_paper(draft, author_username)


@router.get("/api/papers/all", response_model=List[Paper])
async def list_all(papers: InMemoryPaperRepository = Depends(get_papers)) -> List[Paper]:
    return await papers.list_all_papers()


@router.get("/api/papers/search", response_model=List[Paper])
async def search(
    keyword: str = "",
    papers: InMemoryPaperRepository = Depends(get_papers),
) -> List[Paper]:
    results = await papers.search_papers(keyword)
    logger.debug(f"Search completed - found {len(results)} papers for keyword: '{keyword}'")
    return results


@router.get("/api/papers/published", response_model=List[Paper])
async def list_published(papers: InMemoryPaperRepository = Depends(get_papers)) -> List[Paper]:
    return await papers.list_published_papers()


@router.get("/api/papers/unpublished", response_model=List[Paper])
async def list_unpublished(papers: InMemoryPaperRepository = Depends(get_papers)) -> List[Paper]:
    return await papers.list_unpublished_papers()


@router.get("/api/papers/author/{username:path}", response_model=List[Paper])
async def list_by_author(
    username: str,
    papers: InMemoryPaperRepository = Depends(get_papers),
) -> List[Paper]:
    return await papers.list_papers_by_author(username)


@router.get("/api/papers/committee/{username:path}", response_model=List[Paper])
async def list_by_committee(
    username: str,
    papers: InMemoryPaperRepository = Depends(get_papers),
) -> List[Paper]:
    return await papers.list_papers_published_by(username)


@router.post("/api/papers/publish/{paper_id}", response_model=Paper)
async def publish(
    paper_id: int,
    committee_username: str,
    papers: InMemoryPaperRepository = Depends(get_papers),
) -> Paper:
    logger.info(f"Publish paper request for paper ID: {paper_id}, committee member: {committee_username}")
    return await papers.publish_paper(paper_id, committee_username)


@router.get("/api/papers/{paper_id}", response_model=Paper)
async def get_paper(
    paper_id: int,
    papers: InMemoryPaperRepository = Depends(get_papers),
) -> Paper:
    return await papers.get_paper(paper_id)
