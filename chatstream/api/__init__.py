"""FastAPI endpoints for the chat relay.

HTTP and streaming routes with async request handling.
Supports Server-Sent Events for real-time chat streaming.

Endpoints:
    - GET /health: Service health status
    - GET /api/welcome: Smoke-test greeting
    - POST /api/chat: Streamed chat completion
"""
