"""Author dashboard: my papers and draft submission."""

from typing import List, Optional

from ..core.models import Paper, PaperDraft
from ..repository.base import PaperRepository
from ..session.store import SessionStore
from ..utils.logging import get_logger
from .base import WorkflowView

logger = get_logger(__name__)


class AuthorWorkflow(WorkflowView):
    """Lists the current author's papers and submits new drafts.

    After a successful submission the list is reloaded from the repository
    rather than patched locally.
    """

    def __init__(self, repository: PaperRepository, session: SessionStore, timeout: Optional[float] = None) -> None:
        super().__init__(session, timeout=timeout)
        self.repository = repository
        self.my_papers: List[Paper] = []

    async def load(self) -> Optional[List[Paper]]:
        return await self._run("load my papers", self._reload())

    async def _reload(self) -> List[Paper]:
        user = self._current_user()
        papers = await self._call(self.repository.list_papers_by_author(user.username))
        self.my_papers = papers
        return papers

    async def submit(self, draft: PaperDraft) -> Optional[Paper]:
        """Create a paper from a draft; returns the stored paper or None on failure."""
        return await self._run("create paper", self._submit(draft))

    async def _submit(self, draft: PaperDraft) -> Paper:
        draft.ensure_complete()
        user = self._current_user()
        paper = await self._call(self.repository.create_paper(draft, user.username))
        logger.info("Draft accepted", extra={"paper_id": paper.id, "author": user.username})
        await self._refresh_after("create paper", self._reload())
        return paper
