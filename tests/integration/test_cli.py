"""Integration tests for the Typer CLI.

The CLI talks to an in-process application through httpx's ASGI transport
and keeps its session in memory, so nothing touches the network or disk.
"""

import httpx
import pytest
from typer.testing import CliRunner

from paperhub.cli import main as cli
from paperhub.repository.http import HttpPaperService
from paperhub.session.storage import MemoryStorage
from paperhub.session.store import SessionStore
from paperhub.web.app import create_app
from tests.conftest import PASSWORD

runner = CliRunner()


@pytest.fixture
def session(users, papers, monkeypatch):
    store = SessionStore(MemoryStorage())
    app = create_app(users, papers, seed=False)

    def build_service() -> HttpPaperService:
        client = httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")
        return HttpPaperService(base_url="http://test", client=client)

    monkeypatch.setattr(cli, "build_session", lambda: store)
    monkeypatch.setattr(cli, "build_service", build_service)
    return store


def _login(username: str):
    return runner.invoke(cli.app, ["login", "-u", username, "-p", PASSWORD])


def _submit(title: str = "Graphs", abstract: str = "A survey."):
    return runner.invoke(cli.app, ["submit", "--title", title, "--abstract", abstract, "--tags", "gnn, ml"])


def test_login_reports_landing_dashboard(session):
    result = _login("carol")
    assert result.exit_code == 0
    assert "Welcome carol (COMMITTEE) -> /dashboard/committee" in result.stdout
    assert session.get_current_user().username == "carol"


def test_login_failure(session):
    result = runner.invoke(cli.app, ["login", "-u", "alice", "-p", "wrong-password"])
    assert result.exit_code == 1
    assert "Invalid username or password" in result.stdout
    assert not session.is_logged_in()


def test_signup_rejects_bad_email(session, users):
    result = runner.invoke(
        cli.app, ["signup", "-u", "erin", "-e", "not-an-email", "-p", PASSWORD, "--role", "AUTHOR"]
    )
    assert result.exit_code == 1
    assert "Please enter a valid email address" in result.stdout
    assert not users.exists("erin")


def test_signup_then_whoami(session):
    result = runner.invoke(
        cli.app, ["signup", "-u", "erin", "-e", "erin@example.com", "-p", PASSWORD, "--role", "author"]
    )
    assert result.exit_code == 0
    assert "User registered successfully!" in result.stdout

    assert _login("erin").exit_code == 0
    result = runner.invoke(cli.app, ["whoami"])
    assert result.exit_code == 0
    assert "erin <erin@example.com> AUTHOR -> /dashboard/author" in result.stdout


def test_whoami_requires_login(session):
    result = runner.invoke(cli.app, ["whoami"])
    assert result.exit_code == 1
    assert "Not logged in." in result.stdout


def test_author_submits_and_lists(session, papers):
    _login("alice")
    result = _submit()
    assert result.exit_code == 0
    assert "Paper created with ID 1" in result.stdout
    assert len(papers) == 1

    result = runner.invoke(cli.app, ["papers"])
    assert result.exit_code == 0
    assert "My Papers" in result.stdout
    assert "Graphs" in result.stdout


def test_submit_requires_title_and_abstract(session, papers):
    _login("alice")
    result = _submit(abstract="  ")
    assert result.exit_code == 1
    assert "Please fill in required fields" in result.stdout
    assert len(papers) == 0


def test_student_may_not_submit(session):
    _login("dave")
    result = _submit()
    assert result.exit_code == 1
    assert "may not createPaper" in result.stdout


def test_committee_publish_with_confirmation(session, papers):
    _login("alice")
    _submit()
    _login("carol")

    declined = runner.invoke(cli.app, ["publish", "1"], input="n\n")
    assert declined.exit_code == 0
    assert "Cancelled." in declined.stdout
    assert len(papers._papers) == 1 and not papers._papers[1].published

    result = runner.invoke(cli.app, ["publish", "1"], input="y\n")
    assert result.exit_code == 0
    assert "Published 'Graphs'" in result.stdout
    assert papers._papers[1].published_by_username == "carol"

    again = runner.invoke(cli.app, ["publish", "1", "--yes"])
    assert again.exit_code == 1
    assert "already published by carol" in again.stdout


def test_author_may_not_publish(session):
    _login("alice")
    _submit()
    result = runner.invoke(cli.app, ["publish", "1", "--yes"])
    assert result.exit_code == 1
    assert "may not publishPaper" in result.stdout


def test_student_search(session):
    _login("alice")
    _submit("Graphs")
    _submit("Compilers", "Parsing text.")
    _login("dave")

    result = runner.invoke(cli.app, ["search", "compilers"])
    assert result.exit_code == 0
    assert "Results for 'compilers'" in result.stdout
    assert "Compilers" in result.stdout
    assert "Graphs" not in result.stdout


def test_logout_guards_dashboards(session):
    _login("dave")
    assert runner.invoke(cli.app, ["logout"]).exit_code == 0
    assert session.get_current_user() is None

    result = runner.invoke(cli.app, ["papers"])
    assert result.exit_code == 1
    assert "Not logged in." in result.stdout
