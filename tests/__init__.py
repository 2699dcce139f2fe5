"""Test suite for PaperHub.

Unit tests cover the models, access policy, session store, repositories and
workflows; integration tests drive the web service over HTTP. To run the
tests, execute `pytest` from the project root.
"""
