"""Role-scoped paper lifecycle workflows.

Each workflow wraps a repository and the session store and exposes the
state its view renders (lists, ``loading`` and ``error``):

- :class:`AuthWorkflow` – login, signup and logout
- :class:`AuthorWorkflow` – my papers and draft submission
- :class:`CommitteeWorkflow` – pending queue and publication
- :class:`StudentWorkflow` – browsing and search
"""

from .auth import AuthWorkflow
from .author import AuthorWorkflow
from .base import WorkflowView
from .committee import CommitteeWorkflow
from .student import StudentWorkflow

__all__ = [
    "AuthWorkflow",
    "AuthorWorkflow",
    "CommitteeWorkflow",
    "StudentWorkflow",
    "WorkflowView",
]
