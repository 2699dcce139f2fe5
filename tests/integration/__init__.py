"""Integration test package.

These tests exercise the web service, the HTTP client and the CLI
together, using an in-process ASGI transport instead of a network.
"""
