"""CLI application using Typer for PaperHub."""

import asyncio
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from ..access.policy import Capability, Route, can_perform, landing_route, resolve_route
from ..config.settings import settings
from ..core.models import Identity, Paper, PaperDraft
from ..repository.http import HttpPaperService
from ..session.storage import SqliteStorage
from ..session.store import SessionStore
from ..utils.logging import get_logger
from ..workflow import AuthorWorkflow, AuthWorkflow, CommitteeWorkflow, StudentWorkflow, WorkflowView

app = typer.Typer(
    name="paperhub",
    help="PaperHub - submit, review and publish academic papers",
    add_completion=False,
)

console = Console()
logger = get_logger(__name__)


def build_session() -> SessionStore:
    return SessionStore(SqliteStorage(settings.session_db_path), key=settings.session_key)


def build_service() -> HttpPaperService:
    return HttpPaperService(settings.api_base_url)


def _fail(view: WorkflowView, fallback: str) -> None:
    console.print(f"[red]{view.error or fallback}[/red]")
    raise typer.Exit(1)


def _require_identity(session: SessionStore, requested: Route) -> Identity:
    identity = session.get_current_user()
    if resolve_route(requested, identity) is Route.LOGIN:
        console.print("[red]Not logged in.[/red] Run [bold]paperhub login[/bold] first.")
        raise typer.Exit(1)
    return identity


def _require_capability(identity: Identity, capability: Capability) -> None:
    if not can_perform(identity.role, capability):
        console.print(f"[red]Role {identity.role or 'unknown'} may not {capability.value}.[/red]")
        raise typer.Exit(1)


def _papers_table(title: str, papers: List[Paper]) -> Table:
    table = Table(title=title)
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Title", style="bold")
    table.add_column("Author")
    table.add_column("Tags")
    table.add_column("Status")
    for paper in papers:
        status = (
            f"[green]published by {paper.published_by_username}[/green]"
            if paper.published
            else "[yellow]pending[/yellow]"
        )
        table.add_row(str(paper.id), paper.title, paper.author_username, ", ".join(paper.tags), status)
    if not papers:
        table.add_row("-", "[dim]no papers[/dim]", "", "", "")
    return table


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Hostname to bind the web server to."),
    port: int = typer.Option(8080, "--port", help="Port for the web server."),
    reload: bool = typer.Option(False, "--reload/--no-reload", help="Enable auto-reload (development only)."),
) -> None:
    """Start the paper service."""
    from ..web.app import start_server

    console.print(f"[bold blue]Starting paper service[/bold blue] at http://{host}:{port}")
    start_server(host=host, port=port, reload=reload)


@app.command()
def signup(
    username: str = typer.Option(..., "--username", "-u", prompt=True),
    email: str = typer.Option(..., "--email", "-e", prompt=True),
    password: str = typer.Option(..., "--password", "-p", prompt=True, hide_input=True),
    role: str = typer.Option("STUDENT", "--role", "-r", help="STUDENT, AUTHOR or COMMITTEE"),
) -> None:
    """Register a new account."""
    session = build_session()

    async def _run() -> Optional[Route]:
        async with build_service() as service:
            flow = AuthWorkflow(service, session)
            route = await flow.signup(username, email, password, role)
            if route is None:
                _fail(flow, "Registration failed. Please try again.")
            console.print(f"[green]{flow.message or 'Registered.'}[/green] Please log in to continue.")
            return route

    asyncio.run(_run())


@app.command()
def login(
    username: str = typer.Option(..., "--username", "-u", prompt=True),
    password: str = typer.Option(..., "--password", "-p", prompt=True, hide_input=True),
) -> None:
    """Log in and remember the session."""
    session = build_session()

    async def _run() -> None:
        async with build_service() as service:
            flow = AuthWorkflow(service, session)
            route = await flow.login(username, password)
            if route is None:
                _fail(flow, "Login failed. Please try again.")
            user = session.get_current_user()
            console.print(f"[green]Welcome {user.username}[/green] ({user.role}) -> {route.value}")

    asyncio.run(_run())


@app.command()
def logout() -> None:
    """Forget the stored session."""
    session = build_session()
    session.logout()
    console.print("Logged out.")


@app.command()
def whoami() -> None:
    """Show the current identity and its landing dashboard."""
    session = build_session()
    user = session.get_current_user()
    if user is None:
        console.print("[yellow]Not logged in.[/yellow]")
        raise typer.Exit(1)
    console.print(f"{user.username} <{user.email}> {user.role} -> {landing_route(user.role).value}")


@app.command()
def papers() -> None:
    """Show the dashboard of the current role."""
    session = build_session()
    identity = _require_identity(session, Route.DEFAULT_DASHBOARD)
    route = landing_route(identity.role)

    async def _run() -> None:
        async with build_service() as service:
            if route is Route.AUTHOR_DASHBOARD:
                flow = AuthorWorkflow(service, session)
                if await flow.load() is None:
                    _fail(flow, "Could not load papers.")
                console.print(_papers_table("My Papers", flow.my_papers))
            elif route is Route.COMMITTEE_DASHBOARD:
                flow = CommitteeWorkflow(service, session)
                if await flow.load() is None:
                    _fail(flow, "Could not load papers.")
                console.print(_papers_table("Pending Review", flow.pending))
                console.print(_papers_table("All Papers", flow.all_papers))
            else:
                flow = StudentWorkflow(service, session)
                if await flow.load() is None:
                    _fail(flow, "Could not load papers.")
                console.print(_papers_table("All Papers", flow.results))

    asyncio.run(_run())


@app.command()
def search(keyword: str = typer.Argument("", help="Keyword matched against title, abstract and tags")) -> None:
    """Search papers."""
    session = build_session()
    identity = _require_identity(session, Route.STUDENT_DASHBOARD)
    _require_capability(identity, Capability.SEARCH_PAPERS)

    async def _run() -> None:
        async with build_service() as service:
            flow = StudentWorkflow(service, session)
            if await flow.load() is None:
                _fail(flow, "Could not load papers.")
            if await flow.search(keyword) is None:
                _fail(flow, "Search failed.")
            title = f"Results for '{flow.keyword}'" if flow.keyword else "All Papers"
            console.print(_papers_table(title, flow.results))

    asyncio.run(_run())


@app.command()
def submit(
    title: str = typer.Option(..., "--title", "-t", prompt=True),
    abstract: str = typer.Option(..., "--abstract", "-a", prompt=True),
    content: str = typer.Option("", "--content", "-c"),
    tags: str = typer.Option("", "--tags", help="Comma-separated tags"),
) -> None:
    """Submit a new paper (authors only)."""
    session = build_session()
    identity = _require_identity(session, Route.AUTHOR_DASHBOARD)
    _require_capability(identity, Capability.CREATE_PAPER)
    draft = PaperDraft.from_form(title, abstract, content, tags)

    async def _run() -> None:
        async with build_service() as service:
            flow = AuthorWorkflow(service, session)
            paper = await flow.submit(draft)
            if paper is None:
                _fail(flow, "Error creating paper.")
            console.print(f"[green]Paper created with ID {paper.id}[/green]")
            if flow.last_error is not None:
                console.print(f"[yellow]Could not refresh your papers: {flow.error}[/yellow]")
                return
            console.print(_papers_table("My Papers", flow.my_papers))

    asyncio.run(_run())


@app.command()
def publish(
    paper_id: int = typer.Argument(..., help="ID of the paper to publish"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
) -> None:
    """Publish a pending paper (committee only)."""
    session = build_session()
    identity = _require_identity(session, Route.COMMITTEE_DASHBOARD)
    _require_capability(identity, Capability.PUBLISH_PAPER)

    def confirm(pid: int) -> bool:
        return yes or typer.confirm(f"Publish paper {pid}? This cannot be undone.")

    async def _run() -> None:
        async with build_service() as service:
            flow = CommitteeWorkflow(service, session)
            paper = await flow.publish(paper_id, confirm)
            if paper is None:
                if flow.last_error is None:
                    console.print("Cancelled.")
                    return
                _fail(flow, "Error publishing paper.")
            console.print(f"[green]Published '{paper.title}'[/green]")
            if flow.last_error is not None:
                console.print(f"[yellow]Could not refresh the review queue: {flow.error}[/yellow]")
                return
            console.print(_papers_table("Pending Review", flow.pending))

    asyncio.run(_run())


if __name__ == "__main__":
    app()
