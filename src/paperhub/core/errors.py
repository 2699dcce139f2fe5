"""Error taxonomy shared by the workflows, the HTTP client and the service.

Every error carries a human-readable ``message`` that is shown to the user
verbatim, a stable wire ``code`` and the HTTP status the service answers
with. The client rebuilds the matching class from an error payload via
:func:`error_from_payload`.
"""

from typing import Any, Dict, Optional, Type


class PaperHubError(Exception):
    """Base class for all workflow-level failures."""

    code = "error"
    status_code = 400

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_payload(self) -> Dict[str, str]:
        return {"error": self.code, "message": self.message}


class ValidationError(PaperHubError):
    """A required field is missing or malformed."""

    code = "validation_error"
    status_code = 400


class AuthError(PaperHubError):
    """Bad credentials, duplicate registration or a role that may not act."""

    code = "auth_error"
    status_code = 401


class NotFoundError(PaperHubError):
    code = "not_found"
    status_code = 404


class AlreadyPublishedError(PaperHubError):
    code = "already_published"
    status_code = 409


class TransportError(PaperHubError):
    """The remote call itself failed (network fault, timeout, server error)."""

    code = "transport_error"
    status_code = 502


ERROR_CLASSES: Dict[str, Type[PaperHubError]] = {
    cls.code: cls
    for cls in (ValidationError, AuthError, NotFoundError, AlreadyPublishedError, TransportError)
}

_STATUS_FALLBACK: Dict[int, Type[PaperHubError]] = {
    400: ValidationError,
    401: AuthError,
    403: AuthError,
    404: NotFoundError,
    422: ValidationError,
}


def error_from_payload(status_code: int, payload: Any) -> PaperHubError:
    """Rebuild a typed error from a service error response.

    The ``error`` code wins; the HTTP status is only consulted when the
    payload carries no recognised code. Anything unrecognised becomes a
    :class:`TransportError`.
    """
    code = None
    message = None
    if isinstance(payload, dict):
        code = payload.get("error")
        message = payload.get("message") or payload.get("detail")
    if not isinstance(message, str) or not message:
        message = f"Request failed with status {status_code}"
    cls = ERROR_CLASSES.get(code) if isinstance(code, str) else None
    cls = cls or _STATUS_FALLBACK.get(status_code, TransportError)
    return cls(message, status_code=status_code)
