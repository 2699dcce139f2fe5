"""Login, signup and logout."""

from typing import Optional

from ..access.policy import Route, landing_route
from ..core.validation import validate_login, validate_signup
from ..repository.base import AuthGateway
from ..session.store import SessionStore
from ..utils.logging import get_logger
from .base import WorkflowView

logger = get_logger(__name__)


class AuthWorkflow(WorkflowView):
    """Turns credential submissions into a session and a landing route."""

    def __init__(self, gateway: AuthGateway, session: SessionStore, timeout: Optional[float] = None) -> None:
        super().__init__(session, timeout=timeout)
        self.gateway = gateway
        self.message: Optional[str] = None

    async def login(self, username: Optional[str], password: Optional[str]) -> Optional[Route]:
        """Authenticate and store the identity; returns the landing route."""
        return await self._run("login", self._login(username, password))

    async def _login(self, username: Optional[str], password: Optional[str]) -> Route:
        credentials = validate_login(username, password)
        identity = await self._call(self.gateway.login(credentials.username, credentials.password))
        self.session.set_current_user(identity)
        route = landing_route(identity.role)
        logger.info("Routing after login", extra={"username": identity.username, "route": route.value})
        return route

    async def signup(
        self,
        username: Optional[str],
        email: Optional[str],
        password: Optional[str],
        role: Optional[str],
    ) -> Optional[Route]:
        """Register an account. On success the user is sent to the login page."""
        return await self._run("signup", self._signup(username, email, password, role))

    async def _signup(
        self,
        username: Optional[str],
        email: Optional[str],
        password: Optional[str],
        role: Optional[str],
    ) -> Route:
        registration = validate_signup(username, email, password, role)
        self.message = await self._call(
            self.gateway.signup(
                registration.username,
                registration.email,
                registration.password,
                registration.role,
            )
        )
        return Route.LOGIN

    def logout(self) -> Route:
        self.session.logout()
        self.message = None
        return Route.LOGIN
