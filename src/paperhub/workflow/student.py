"""Student dashboard: browse and search papers."""

from typing import List, Optional

from ..core.models import Paper
from ..repository.base import PaperRepository
from ..session.store import SessionStore
from ..utils.logging import get_logger
from .base import WorkflowView

logger = get_logger(__name__)


class StudentWorkflow(WorkflowView):
    """``papers`` holds the unfiltered list; ``results`` what is shown.

    ``keyword`` always describes ``results``: it only changes together with
    them, so a late search result can never sit under a cleared keyword.
    """

    def __init__(self, repository: PaperRepository, session: SessionStore, timeout: Optional[float] = None) -> None:
        super().__init__(session, timeout=timeout)
        self.repository = repository
        self.papers: List[Paper] = []
        self.results: List[Paper] = []
        self.keyword = ""

    async def load(self) -> Optional[List[Paper]]:
        return await self._run("load papers", self._load())

    async def _load(self) -> List[Paper]:
        papers = await self._call(self.repository.list_all_papers())
        self.papers = papers
        self.results = papers
        self.keyword = ""
        return papers

    async def search(self, keyword: Optional[str]) -> Optional[List[Paper]]:
        keyword = (keyword or "").strip()
        if self.busy:
            logger.info(f"Ignoring search for '{keyword}': another action is still in flight")
            return None
        # A blank keyword resets to the loaded list without a remote query.
        if not keyword:
            self.keyword = ""
            self.results = self.papers
            self.last_error = None
            return self.results
        return await self._run("search papers", self._search(keyword))

    async def _search(self, keyword: str) -> List[Paper]:
        results = await self._call(self.repository.search_papers(keyword))
        self.keyword = keyword
        self.results = results
        return results
