"""Integration tests for components working together as a system.

Coverage:
    - API endpoints with real HTTP requests through ASGITransport
    - Stream protocol framing, ordering, and error events
    - UI stream client feeding a chat session
    - Model responses with live LLM calls (when GOOGLE_API_KEY is set)

The model provider is scripted unless a test is marked requires_api_key.
"""
