"""Paper and account repositories.

``base`` defines the asynchronous contracts, ``memory`` holds the
authoritative in-process stores used by the web service, and ``http``
talks to that service over the network.
"""

from .base import AuthGateway, PaperRepository  # noqa: F401
from .http import HttpPaperService  # noqa: F401
from .memory import InMemoryPaperRepository, InMemoryUserDirectory, seed_demo_data  # noqa: F401
