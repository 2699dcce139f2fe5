"""PaperHub: role-scoped paper submission, review and publication."""

__version__ = "0.1.0"
