"""Test package for chatstream.

Unit tests cover isolated logic; integration tests drive the FastAPI app
through ASGITransport.

Structure:
    - unit/: Individual function and class tests
    - integration/: End-to-end streaming and UI client tests

Leverages pytest with pytest-check for soft assertions.
"""
