"""Shared view state for the role workflows."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Optional, TypeVar

from ..config.settings import settings
from ..core.errors import AuthError, PaperHubError, TransportError
from ..core.models import Identity
from ..session.store import SessionStore
from ..utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class WorkflowView:
    """
    State a role view renders: a loading flag, the last error message and an
    in-flight guard.

    Actions go through :meth:`_run`. While one action is in flight, further
    actions are refused without touching the repository. Failures are
    recorded in ``error`` (message kept verbatim) and never propagate, so
    the view always returns to an interactive state.
    """

    def __init__(self, session: SessionStore, timeout: Optional[float] = None) -> None:
        self.session = session
        self.timeout = timeout or settings.request_timeout
        self.loading = False
        self.last_error: Optional[PaperHubError] = None
        self._busy = False

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def error(self) -> Optional[str]:
        return self.last_error.message if self.last_error else None

    def _current_user(self) -> Identity:
        user = self.session.get_current_user()
        if user is None:
            raise AuthError("Error: No user logged in")
        return user

    async def _call(self, awaitable: Awaitable[T]) -> T:
        """Await a repository call, bounded by the configured timeout."""
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise TransportError(f"Request timed out after {self.timeout:g}s") from e

    async def _run(self, action: str, operation: Awaitable[T]) -> Optional[T]:
        if self._busy:
            logger.info(f"Ignoring '{action}': another action is still in flight")
            if asyncio.iscoroutine(operation):
                operation.close()
            return None
        self._busy = True
        self.last_error = None
        self.loading = True
        try:
            return await operation
        except PaperHubError as e:
            self.last_error = e
            logger.warning(f"{action} failed: {e.message}", extra={"error_code": e.code})
            return None
        finally:
            self.loading = False
            self._busy = False

    async def _refresh_after(self, action: str, refresh: Awaitable[object]) -> None:
        """Re-query views after a mutation that already succeeded.

        A failed refresh is recorded in ``error`` but does not turn the
        mutation into a failure; the views keep their previous contents.
        """
        try:
            await refresh
        except PaperHubError as e:
            self.last_error = e
            logger.warning(f"{action} succeeded but refresh failed: {e.message}", extra={"error_code": e.code})
