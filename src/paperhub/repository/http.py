"""HTTP client for the remote paper/auth service."""

from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from ..config.settings import settings
from ..core.errors import TransportError, error_from_payload
from ..core.models import Identity, Paper, PaperDraft
from ..utils.logging import get_logger
from .base import AuthGateway, PaperRepository

logger = get_logger(__name__)


def _segment(value: str) -> str:
    """Percent-encode a value for use as one URL path segment."""
    return quote(value, safe="")


class HttpPaperService(PaperRepository, AuthGateway):
    """JSON-over-HTTP implementation of both service contracts.

    Read-only calls are retried on transport faults; calls that change
    state are sent exactly once. Error responses are turned back into the
    typed errors of :mod:`paperhub.core.errors` with the service message
    kept verbatim.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.client = client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout or settings.request_timeout,
            limits=httpx.Limits(max_keepalive_connections=5, max_connections=10),
            headers={"User-Agent": "PaperHub/0.1.0", "Content-Type": "application/json"},
        )

    @staticmethod
    def _raise_for_error(response: httpx.Response) -> None:
        if response.status_code < 400:
            return
        try:
            payload: Any = response.json()
        except ValueError:
            payload = None
        error = error_from_payload(response.status_code, payload)
        logger.warning(
            f"Service returned {response.status_code}: {error.message}",
            extra={"path": response.request.url.path, "error_code": error.code},
        )
        raise error

    @retry(
        stop=stop_after_attempt(settings.max_retries),
        wait=wait_exponential(
            multiplier=settings.retry_backoff_factor, max=settings.retry_max_wait
        ),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    async def _send_idempotent(self, path: str, params: Optional[Dict[str, Any]]) -> httpx.Response:
        return await self.client.get(path, params=params)

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        logger.debug("Calling paper service", extra={"method": method, "path": path, "params": params})
        try:
            if method == "GET":
                response = await self._send_idempotent(path, params)
            else:
                response = await self.client.request(method, path, params=params, json=json)
        except httpx.TimeoutException as e:
            raise TransportError(f"Request to {path} timed out") from e
        except httpx.TransportError as e:
            raise TransportError(f"Could not reach paper service: {e}") from e
        self._raise_for_error(response)
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(f"Malformed response from {path}") from e

    async def _papers(self, path: str, params: Optional[Dict[str, Any]] = None) -> List[Paper]:
        data = await self._request("GET", path, params=params)
        return [Paper.model_validate(item) for item in data]

    # Auth

    async def login(self, username: str, password: str) -> Identity:
        data = await self._request(
            "POST", "/api/auth/login", json={"username": username, "password": password}
        )
        return Identity.model_validate(data)

    async def signup(self, username: str, email: str, password: str, role: str) -> str:
        data = await self._request(
            "POST",
            "/api/auth/signup",
            json={"username": username, "email": email, "password": password, "role": role},
        )
        return data.get("message", "")

    # Papers

    async def create_paper(self, draft: PaperDraft, author_username: str) -> Paper:
        data = await self._request(
            "POST",
            "/api/papers/create",
            params={"author_username": author_username},
            json=draft.model_dump(mode="json"),
        )
        return Paper.model_validate(data)

    async def list_papers_by_author(self, username: str) -> List[Paper]:
        return await self._papers(f"/api/papers/author/{_segment(username)}")

    async def list_all_papers(self) -> List[Paper]:
        return await self._papers("/api/papers/all")

    async def list_unpublished_papers(self) -> List[Paper]:
        return await self._papers("/api/papers/unpublished")

    async def list_published_papers(self) -> List[Paper]:
        return await self._papers("/api/papers/published")

    async def list_papers_published_by(self, committee_username: str) -> List[Paper]:
        return await self._papers(f"/api/papers/committee/{_segment(committee_username)}")

    async def search_papers(self, keyword: str) -> List[Paper]:
        return await self._papers("/api/papers/search", params={"keyword": keyword})

    async def get_paper(self, paper_id: int) -> Paper:
        data = await self._request("GET", f"/api/papers/{paper_id}")
        return Paper.model_validate(data)

    async def publish_paper(self, paper_id: int, committee_username: str) -> Paper:
        data = await self._request(
            "POST",
            f"/api/papers/publish/{paper_id}",
            params={"committee_username": committee_username},
        )
        return Paper.model_validate(data)

    async def close(self) -> None:
        await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} base_url={self.base_url}>"
