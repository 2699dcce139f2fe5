"""Session persistence.

The :class:`SessionStore` keeps the authenticated identity for the current
client and survives restarts through a :class:`KeyValueStorage` backend.
"""

from .storage import KeyValueStorage, MemoryStorage, SqliteStorage  # noqa: F401
from .store import SessionStore  # noqa: F401
