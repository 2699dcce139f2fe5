"""Session store holding the authenticated identity.

The store is the single writer of the current identity. Reads go through
:meth:`SessionStore.get_current_user`; every mutation is persisted first and
then pushed synchronously to all subscribers, so dependent views can react
without polling.
"""

from __future__ import annotations

from typing import Callable, List, Optional

from pydantic import ValidationError as PydanticValidationError

from ..core.models import Identity
from ..utils.logging import get_logger
from .storage import KeyValueStorage

logger = get_logger(__name__)

Observer = Callable[[Optional[Identity]], None]


class SessionStore:
    """Observable, durably persisted holder of the current identity."""

    def __init__(self, storage: KeyValueStorage, key: str = "currentUser") -> None:
        self.storage = storage
        self.key = key
        self._observers: List[Observer] = []
        self._current: Optional[Identity] = self._rehydrate()

    def _rehydrate(self) -> Optional[Identity]:
        raw = self.storage.get(self.key)
        if raw is None:
            return None
        try:
            identity = Identity.model_validate_json(raw)
        except (PydanticValidationError, ValueError) as e:
            logger.warning(f"Discarding unreadable session record: {e}")
            self.storage.delete(self.key)
            return None
        logger.debug("Session restored", extra={"username": identity.username, "role": identity.role})
        return identity

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register an observer; returns a callable that unsubscribes it."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _notify(self) -> None:
        for observer in list(self._observers):
            observer(self._current)

    def set_current_user(self, identity: Identity) -> None:
        self.storage.set(self.key, identity.model_dump_json())
        self._current = identity
        logger.info("Session started", extra={"username": identity.username, "role": identity.role})
        self._notify()

    def get_current_user(self) -> Optional[Identity]:
        return self._current

    def get_user_role(self) -> Optional[str]:
        user = self.get_current_user()
        return user.role if user else None

    def is_logged_in(self) -> bool:
        return self.get_current_user() is not None

    def logout(self) -> None:
        self.storage.delete(self.key)
        previous = self._current
        self._current = None
        if previous is not None:
            logger.info("Session ended", extra={"username": previous.username})
        self._notify()
