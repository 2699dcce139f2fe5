"""FastAPI application for the PaperHub service.

This module builds the FastAPI application, attaches the in-memory account
and paper stores, renders every failure as ``{"error", "message"}`` and
provides a convenience function to launch the server via Uvicorn.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import uvicorn

from .routes import router
from ..config.settings import settings
from ..core.errors import PaperHubError, ValidationError
from ..repository.memory import InMemoryPaperRepository, InMemoryUserDirectory, seed_demo_data
from ..utils.logging import get_logger

logger = get_logger(__name__)


def create_app(
    users: Optional[InMemoryUserDirectory] = None,
    papers: Optional[InMemoryPaperRepository] = None,
    seed: Optional[bool] = None,
) -> FastAPI:
    """Build an application around the given stores (fresh ones by default)."""
    if users is None:
        users = InMemoryUserDirectory()
    if papers is None:
        papers = InMemoryPaperRepository(users)
    seed = settings.seed_demo_data if seed is None else seed

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if seed:
            await seed_demo_data(app.state.users, app.state.papers)
        yield

    app = FastAPI(
        title="PaperHub",
        description="Paper submission, review and publication service",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.users = users
    app.state.papers = papers

    @app.exception_handler(PaperHubError)
    async def handle_paperhub_error(request: Request, exc: PaperHubError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        if errors:
            first = errors[0]
            field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
            message = f"Error: {field}: {first.get('msg', 'invalid value')}"
        else:
            message = "Error: invalid request"
        logger.warning(f"Rejected request to {request.url.path}: {message}")
        return JSONResponse(status_code=400, content=ValidationError(message).to_payload())

    app.include_router(router)

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    return app


app = create_app()


def start_server(host: str = "0.0.0.0", port: int = 8080, reload: bool = False) -> None:
    """Start the Uvicorn web server.

    Parameters
    ----------
    host: str
        Host to bind the server to. Defaults to ``0.0.0.0``.
    port: int
        Port to listen on. Defaults to 8080.
    reload: bool
        Whether to enable auto-reload. Useful during development.
    """
    uvicorn.run(
        "paperhub.web.app:app",
        host=host,
        port=port,
        reload=reload,
    )


if __name__ == "__main__":
    start_server()
