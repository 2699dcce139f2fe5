"""Web package for PaperHub.

This package contains the FastAPI application serving accounts and papers
to the client workflows over JSON.

To start the web server from the CLI use:
    paperhub serve --port 8080
"""
