"""HTTP client consuming the UI message stream of ``POST /api/chat``."""

import logging
import os
from collections.abc import AsyncGenerator

import httpx
from pydantic import ValidationError

from chatstream.models.schemas import ChatRequest, ErrorChunk, StreamChunk, parse_stream_chunk

logger = logging.getLogger(__name__)

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")
CHAT_PATH = "/api/chat"


def parse_sse_line(line: str) -> StreamChunk | None:
    """Decode one SSE line into a stream event.

    Returns None for non-data lines, the ``[DONE]`` marker, and events this
    client does not understand.
    """
    if not line.startswith("data:"):
        return None
    payload = line[len("data:"):].strip()
    if not payload or payload == "[DONE]":
        return None
    try:
        return parse_stream_chunk(payload)
    except ValidationError as e:
        logger.warning(f"Skipping unrecognized stream event: {e.errors()[0]['msg']}")
        return None


async def _iter_stream(client: httpx.AsyncClient, request: ChatRequest) -> AsyncGenerator[StreamChunk]:
    try:
        async with client.stream(
            "POST",
            CHAT_PATH,
            json=request.to_wire(),
            headers={"Accept": "text/event-stream"},
        ) as response:
            response.raise_for_status()
            async for line in response.aiter_lines():
                if line.strip() == "data: [DONE]":
                    return
                if chunk := parse_sse_line(line):
                    yield chunk
    except httpx.HTTPStatusError as e:
        yield ErrorChunk(error_text=f"HTTP {e.response.status_code}")
    except httpx.RequestError as e:
        yield ErrorChunk(error_text=f"Connection failed: {e}")


async def stream_chat_response(
    request: ChatRequest,
    client: httpx.AsyncClient | None = None,
) -> AsyncGenerator[StreamChunk]:
    """Send a chat request and yield stream events as they arrive.

    Transport failures are reported as a final ErrorChunk rather than raised.

    Args:
        request: Conversation and generation settings.
        client: Client to use; a short-lived one against API_BASE_URL otherwise.

    Yields:
        Parsed stream events, in arrival order.
    """
    if client is not None:
        async for chunk in _iter_stream(client, request):
            yield chunk
        return

    async with httpx.AsyncClient(base_url=API_BASE_URL, timeout=120.0) as owned:
        async for chunk in _iter_stream(owned, request):
            yield chunk
