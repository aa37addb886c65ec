"""UI message stream encoding.

Turns provider events into Server-Sent-Events frames the chat UI can apply
incrementally. Provider failures end the stream with an error event instead
of breaking the HTTP response.
"""

import json
import logging
import uuid
from collections.abc import AsyncGenerator, AsyncIterator
from typing import Any

from chatstream.models.messages import MessageMetadata
from chatstream.models.schemas import (
    SSE_DONE,
    ErrorChunk,
    FileChunk,
    FinishChunk,
    FinishStepChunk,
    ReasoningDeltaChunk,
    ReasoningEndChunk,
    ReasoningStartChunk,
    SourceDocumentChunk,
    SourceUrlChunk,
    StartChunk,
    StartStepChunk,
    StreamChunkBase,
    TextDeltaChunk,
    TextEndChunk,
    TextStartChunk,
)
from chatstream.provider.events import (
    GeneratedFile,
    GenerationFinished,
    ProviderEvent,
    ReasoningDelta,
    SourceDocument,
    SourceUrl,
    TextDelta,
)

logger = logging.getLogger(__name__)

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "X-Accel-Buffering": "no",
    "x-vercel-ai-ui-message-stream": "v1",
}


def error_to_text(error: Any) -> str:
    """Normalize any failure value into a human-readable message."""
    if error is None:
        return "unknown error"
    if isinstance(error, str):
        return error
    if isinstance(error, BaseException):
        # Provider errors may wrap a structured payload instead of a message
        if len(error.args) == 1 and not isinstance(error.args[0], str):
            return error_to_text(error.args[0])
        return str(error) or type(error).__name__
    try:
        return json.dumps(error, default=str)
    except (TypeError, ValueError):
        # Non-string keys or circular references
        return repr(error)


def _new_id() -> str:
    return uuid.uuid4().hex


class UIMessageStreamWriter:
    """Converts provider events into UI message stream chunks.

    Keeps track of the open text and reasoning blocks so consecutive deltas of
    the same kind share a block id.
    """

    def __init__(self, send_reasoning: bool = True, send_sources: bool = True) -> None:
        self.send_reasoning = send_reasoning
        self.send_sources = send_sources
        self._text_id: str | None = None
        self._reasoning_id: str | None = None

    def start(self, message_id: str | None = None) -> list[StreamChunkBase]:
        return [StartChunk(message_id=message_id), StartStepChunk()]

    def close_blocks(self) -> list[StreamChunkBase]:
        """End any open text or reasoning block."""
        chunks: list[StreamChunkBase] = []
        if self._reasoning_id is not None:
            chunks.append(ReasoningEndChunk(id=self._reasoning_id))
            self._reasoning_id = None
        if self._text_id is not None:
            chunks.append(TextEndChunk(id=self._text_id))
            self._text_id = None
        return chunks

    def _text(self, delta: str) -> list[StreamChunkBase]:
        chunks: list[StreamChunkBase] = []
        if self._text_id is None:
            chunks.extend(self.close_blocks())
            self._text_id = _new_id()
            chunks.append(TextStartChunk(id=self._text_id))
        chunks.append(TextDeltaChunk(id=self._text_id, delta=delta))
        return chunks

    def _reasoning(self, delta: str) -> list[StreamChunkBase]:
        chunks: list[StreamChunkBase] = []
        if self._reasoning_id is None:
            chunks.extend(self.close_blocks())
            self._reasoning_id = _new_id()
            chunks.append(ReasoningStartChunk(id=self._reasoning_id))
        chunks.append(ReasoningDeltaChunk(id=self._reasoning_id, delta=delta))
        return chunks

    def write(self, event: ProviderEvent) -> list[StreamChunkBase]:
        """Return the chunks representing one provider event."""
        match event:
            case TextDelta(text=text):
                return self._text(text)
            case ReasoningDelta(text=text):
                return self._reasoning(text) if self.send_reasoning else []
            case SourceUrl(url=url, title=title):
                if not self.send_sources:
                    return []
                return [SourceUrlChunk(source_id=_new_id(), url=url, title=title)]
            case SourceDocument(title=title, media_type=media_type, filename=filename):
                if not self.send_sources:
                    return []
                return [
                    SourceDocumentChunk(
                        source_id=_new_id(),
                        media_type=media_type,
                        title=title,
                        filename=filename,
                    )
                ]
            case GeneratedFile(url=url, media_type=media_type):
                return [*self.close_blocks(), FileChunk(url=url, media_type=media_type)]
            case GenerationFinished(usage=usage):
                return [
                    *self.close_blocks(),
                    FinishStepChunk(),
                    FinishChunk(message_metadata=MessageMetadata(total_usage=usage)),
                ]
        logger.warning(f"Dropping unsupported provider event: {type(event).__name__}")
        return []

    def error(self, error: Any) -> list[StreamChunkBase]:
        return [*self.close_blocks(), ErrorChunk(error_text=error_to_text(error))]


async def ui_message_stream(
    events: AsyncIterator[ProviderEvent],
    writer: UIMessageStreamWriter | None = None,
    message_id: str | None = None,
) -> AsyncGenerator[str]:
    """Encode provider events as SSE frames, ending with ``[DONE]``.

    Any exception raised while consuming ``events`` becomes a single error
    event; the stream then terminates normally.
    """
    writer = writer or UIMessageStreamWriter()
    for chunk in writer.start(message_id):
        yield chunk.to_sse()

    finished = False
    try:
        async for event in events:
            for chunk in writer.write(event):
                yield chunk.to_sse()
            if isinstance(event, GenerationFinished):
                finished = True
                break
    except Exception as e:
        logger.exception("Model generation failed")
        for chunk in writer.error(e):
            yield chunk.to_sse()
    else:
        if not finished:
            for chunk in writer.write(GenerationFinished()):
                yield chunk.to_sse()

    yield SSE_DONE
