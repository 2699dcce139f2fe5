"""Role-based access policy.

Pure lookups with no I/O. Both tables are keyed by :class:`Role`, so adding
a role means adding one row to each. The checks here are advisory: they
decide what the client offers, while the repository enforces roles itself.
"""

from enum import Enum
from typing import Dict, FrozenSet, Optional, Union

from ..core.models import Identity, Role


class Route(str, Enum):
    """Named destinations of the client."""

    LOGIN = "/login"
    SIGNUP = "/signup"
    STUDENT_DASHBOARD = "/dashboard/student"
    AUTHOR_DASHBOARD = "/dashboard/author"
    COMMITTEE_DASHBOARD = "/dashboard/committee"
    DEFAULT_DASHBOARD = "/dashboard"

    @property
    def is_dashboard(self) -> bool:
        return self.value.startswith("/dashboard")


class Capability(str, Enum):
    CREATE_PAPER = "createPaper"
    PUBLISH_PAPER = "publishPaper"
    SEARCH_PAPERS = "searchPapers"
    VIEW_ALL_PAPERS = "viewAllPapers"


LANDING_ROUTES: Dict[Role, Route] = {
    Role.STUDENT: Route.STUDENT_DASHBOARD,
    Role.AUTHOR: Route.AUTHOR_DASHBOARD,
    Role.COMMITTEE: Route.COMMITTEE_DASHBOARD,
}

# Granted to any authenticated user, whatever role string the service issued.
BASE_CAPABILITIES: FrozenSet[Capability] = frozenset(
    {Capability.SEARCH_PAPERS, Capability.VIEW_ALL_PAPERS}
)

CAPABILITIES: Dict[Role, FrozenSet[Capability]] = {
    Role.STUDENT: BASE_CAPABILITIES,
    Role.AUTHOR: BASE_CAPABILITIES | {Capability.CREATE_PAPER},
    Role.COMMITTEE: BASE_CAPABILITIES | {Capability.PUBLISH_PAPER},
}

RoleLike = Union[Role, str, None]


def _as_role(role: RoleLike) -> Optional[Role]:
    if isinstance(role, Role):
        return role
    return Role.parse(role)


def landing_route(role: RoleLike) -> Route:
    """Dashboard a freshly authenticated user is sent to.

    Unknown roles land on the default dashboard instead of being rejected.
    """
    parsed = _as_role(role)
    if parsed is None:
        return Route.DEFAULT_DASHBOARD
    return LANDING_ROUTES[parsed]


def can_perform(role: RoleLike, capability: Capability) -> bool:
    if role is None or (isinstance(role, str) and not role.strip()):
        return False
    parsed = _as_role(role)
    if parsed is None:
        return capability in BASE_CAPABILITIES
    return capability in CAPABILITIES[parsed]


def resolve_route(requested: Route, identity: Optional[Identity]) -> Route:
    """Apply the login guard: dashboards require an identity."""
    if requested.is_dashboard and identity is None:
        return Route.LOGIN
    return requested
