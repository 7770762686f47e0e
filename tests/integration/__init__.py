"""Integration tests for the HTTP API.

Real HTTP requests through ASGITransport against the FastAPI app, with the
tutor service and billing API replaced by stand-ins from conftest.
"""
