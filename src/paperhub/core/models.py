"""Core domain models for identities, drafts and papers."""

from __future__ import annotations

import re
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .errors import ValidationError

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class Role(str, Enum):
    """Roles a user can sign up with."""

    STUDENT = "STUDENT"
    AUTHOR = "AUTHOR"
    COMMITTEE = "COMMITTEE"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["Role"]:
        """Return the matching role, or None for anything unrecognised."""
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().upper())
        except ValueError:
            return None


class Identity(BaseModel):
    """Authenticated user held by the session store."""

    model_config = ConfigDict(frozen=True)

    username: str = Field(..., min_length=1)
    email: str = ""
    role: str = Field(..., description="Role name as issued by the service")

    @field_validator("role", mode="before")
    @classmethod
    def _normalize_role(cls, v: object) -> str:
        if isinstance(v, Role):
            return v.value
        return str(v or "").strip().upper()

    @property
    def role_kind(self) -> Optional[Role]:
        return Role.parse(self.role)


def parse_tags(raw: Optional[str]) -> List[str]:
    """Split a comma-separated tag string.

    Whitespace is trimmed and empty entries dropped; order and duplicates
    are kept as typed.
    """
    if not raw:
        return []
    return [tag.strip() for tag in raw.split(",") if tag.strip()]


class PaperDraft(BaseModel):
    """A paper as submitted by an author, before the repository assigns an id."""

    title: str = ""
    abstract: str = ""
    content: str = ""
    tags: List[str] = Field(default_factory=list)

    @field_validator("tags")
    @classmethod
    def _clean_tags(cls, v: List[str]) -> List[str]:
        return [tag.strip() for tag in v if tag and tag.strip()]

    @classmethod
    def from_form(cls, title: str, abstract: str, content: str = "", raw_tags: str = "") -> "PaperDraft":
        return cls(title=title, abstract=abstract, content=content, tags=parse_tags(raw_tags))

    def ensure_complete(self) -> None:
        """Raise ValidationError unless title and abstract are both non-blank."""
        if not self.title.strip() or not self.abstract.strip():
            raise ValidationError("Please fill in required fields (Title and Abstract)")


class Paper(BaseModel):
    """Authoritative paper record as returned by the repository."""

    id: int
    title: str = Field(..., min_length=1)
    abstract: str = Field(..., min_length=1)
    content: str = ""
    author_username: str = Field(..., min_length=1)
    tags: List[str] = Field(default_factory=list)
    published: bool = False
    published_by_username: Optional[str] = None
    created_at: datetime
    published_at: Optional[datetime] = None

    @model_validator(mode="after")
    def _check_publication(self) -> "Paper":
        if self.published != (self.published_by_username is not None):
            raise ValueError("published must be set exactly when published_by_username is present")
        return self

    def matches(self, keyword: str) -> bool:
        """Case-insensitive substring match over title, abstract and tags."""
        needle = keyword.strip().lower()
        if not needle:
            return True
        haystacks = [self.title, self.abstract, *self.tags]
        return any(needle in text.lower() for text in haystacks)


class Credentials(BaseModel):
    username: str
    password: str


class Registration(BaseModel):
    username: str
    email: str
    password: str
    role: str
