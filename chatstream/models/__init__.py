"""Pydantic models for API requests, responses, and stream events.

Provides type safety, validation, and automatic OpenAPI documentation.

Models:
    - UIMessage: Individual message in conversation, made of typed parts
    - ChatRequest: Incoming chat request payload with generation settings
    - StreamChunk: One event of the streamed UI message protocol
    - Usage: Token accounting attached to finished generations
"""

from chatstream.models.messages import (
    FilePart,
    MessageMetadata,
    MessagePart,
    ReasoningPart,
    SourceDocumentPart,
    SourceUrlPart,
    TextPart,
    UIMessage,
    Usage,
)
from chatstream.models.schemas import (
    ChatRequest,
    ChatStatus,
    StreamChunk,
    WelcomeResponse,
    parse_stream_chunk,
)

__all__ = [
    "ChatRequest",
    "ChatStatus",
    "FilePart",
    "MessageMetadata",
    "MessagePart",
    "ReasoningPart",
    "SourceDocumentPart",
    "SourceUrlPart",
    "StreamChunk",
    "TextPart",
    "UIMessage",
    "Usage",
    "WelcomeResponse",
    "parse_stream_chunk",
]
