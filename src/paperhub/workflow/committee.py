"""Committee dashboard: pending review queue and publication."""

from typing import Callable, List, Optional

from ..core.models import Paper
from ..repository.base import PaperRepository
from ..session.store import SessionStore
from ..utils.logging import get_logger
from .base import WorkflowView

logger = get_logger(__name__)

Confirm = Callable[[int], bool]


class CommitteeWorkflow(WorkflowView):
    """Keeps the pending and all-papers views and publishes submissions.

    Both views are refreshed together, on load and after every publish, so
    a published paper leaves ``pending`` and shows up in ``all_papers`` in
    the same cycle.
    """

    def __init__(self, repository: PaperRepository, session: SessionStore, timeout: Optional[float] = None) -> None:
        super().__init__(session, timeout=timeout)
        self.repository = repository
        self.pending: List[Paper] = []
        self.all_papers: List[Paper] = []

    async def load(self) -> Optional[bool]:
        return await self._run("load committee views", self._refresh())

    async def _refresh(self) -> bool:
        pending = await self._call(self.repository.list_unpublished_papers())
        all_papers = await self._call(self.repository.list_all_papers())
        self.pending = pending
        self.all_papers = all_papers
        return True

    async def publish(self, paper_id: int, confirm: Confirm) -> Optional[Paper]:
        """Publish a paper once ``confirm(paper_id)`` agrees.

        Publication cannot be undone, so nothing is sent unless the
        confirmation callback returns True.
        """
        if self.busy:
            logger.info(f"Ignoring publish of {paper_id}: another action is still in flight")
            return None
        if not confirm(paper_id):
            logger.info(f"Publish of paper {paper_id} cancelled")
            return None
        return await self._run("publish paper", self._publish(paper_id))

    async def _publish(self, paper_id: int) -> Paper:
        user = self._current_user()
        paper = await self._call(self.repository.publish_paper(paper_id, user.username))
        await self._refresh_after("publish paper", self._refresh())
        return paper
