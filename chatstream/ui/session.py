"""Chat state held in the browser session.

The transcript is append-only: only the in-flight assistant message changes,
as stream events are applied to it.
"""

import logging
import uuid

from chatstream.models.messages import (
    FilePart,
    MessageMetadata,
    ReasoningPart,
    SourceDocumentPart,
    SourceUrlPart,
    TextPart,
    UIMessage,
)
from chatstream.models.schemas import (
    ChatRequest,
    ChatStatus,
    ErrorChunk,
    FileChunk,
    FinishChunk,
    GenerationSettings,
    MessageMetadataChunk,
    ReasoningDeltaChunk,
    ReasoningEndChunk,
    ReasoningStartChunk,
    SourceDocumentChunk,
    SourceUrlChunk,
    StartChunk,
    StreamChunk,
    TextDeltaChunk,
    TextEndChunk,
    TextStartChunk,
)

logger = logging.getLogger(__name__)


def _merge_metadata(message: UIMessage, metadata: MessageMetadata | None) -> None:
    if metadata is None:
        return
    if message.metadata is None:
        message.metadata = metadata.model_copy()
    elif metadata.total_usage is not None:
        message.metadata.total_usage = metadata.total_usage


class MessageAssembler:
    """Rebuilds an assistant message from UI message stream events."""

    def __init__(self, message: UIMessage) -> None:
        self.message = message
        self._open: dict[str, TextPart | ReasoningPart] = {}

    def _open_part(self, block_id: str, part: TextPart | ReasoningPart) -> None:
        self.message.parts.append(part)
        self._open[block_id] = part

    def _append(self, block_id: str, delta: str, kind: type[TextPart | ReasoningPart]) -> None:
        part = self._open.get(block_id)
        if part is None:
            # Delta without a start event: open the block implicitly
            part = kind(state="streaming")
            self._open_part(block_id, part)
        part.text += delta

    def _close(self, block_id: str) -> None:
        part = self._open.pop(block_id, None)
        if part is not None:
            part.state = "done"

    def close_all(self) -> None:
        for block_id in list(self._open):
            self._close(block_id)

    def apply(self, chunk: StreamChunk) -> None:
        """Apply one stream event to the message."""
        match chunk:
            case StartChunk():
                if chunk.message_id:
                    self.message.id = chunk.message_id
                _merge_metadata(self.message, chunk.message_metadata)
            case TextStartChunk():
                self._open_part(chunk.id, TextPart(state="streaming"))
            case TextDeltaChunk():
                self._append(chunk.id, chunk.delta, TextPart)
            case ReasoningStartChunk():
                self._open_part(chunk.id, ReasoningPart(state="streaming"))
            case ReasoningDeltaChunk():
                self._append(chunk.id, chunk.delta, ReasoningPart)
            case TextEndChunk() | ReasoningEndChunk():
                self._close(chunk.id)
            case SourceUrlChunk():
                self.message.parts.append(
                    SourceUrlPart(source_id=chunk.source_id, url=chunk.url, title=chunk.title)
                )
            case SourceDocumentChunk():
                self.message.parts.append(
                    SourceDocumentPart(
                        source_id=chunk.source_id,
                        media_type=chunk.media_type,
                        title=chunk.title,
                        filename=chunk.filename,
                    )
                )
            case FileChunk():
                self.message.parts.append(FilePart(media_type=chunk.media_type, url=chunk.url))
            case MessageMetadataChunk() | FinishChunk():
                _merge_metadata(self.message, chunk.message_metadata)
            case _:
                pass


class ChatSession:
    """Manages chat state for a user session.

    Status moves ready -> submitted -> streaming -> ready (or error). A new
    message can be submitted only in the ready or error state.
    """

    def __init__(self, settings: GenerationSettings | None = None) -> None:
        self.messages: list[UIMessage] = []
        self.session_id: str = str(uuid.uuid4())
        self.status: ChatStatus = ChatStatus.READY
        self.error: str | None = None
        self.settings: GenerationSettings = settings or GenerationSettings()
        self._assembler: MessageAssembler | None = None

    @property
    def is_ready(self) -> bool:
        return self.status in (ChatStatus.READY, ChatStatus.ERROR)

    def build_request(self) -> ChatRequest:
        """Request payload carrying the full history and current settings."""
        return ChatRequest(
            id=self.session_id,
            messages=[m.model_copy(deep=True) for m in self.messages],
            temperature=self.settings.temperature,
            max_output_tokens=self.settings.max_output_tokens,
            model=self.settings.model,
            system_prompt=self.settings.system_prompt,
        )

    def submit(self, text: str) -> ChatRequest | None:
        """Append a user message and return the request to send.

        Returns None without changing anything when the text is blank or a
        response is still in flight.
        """
        if not text or not text.strip() or not self.is_ready:
            return None
        self.messages.append(
            UIMessage(id=uuid.uuid4().hex, role="user", parts=[TextPart(text=text)])
        )
        self.status = ChatStatus.SUBMITTED
        self.error = None
        return self.build_request()

    @property
    def in_flight(self) -> UIMessage | None:
        """The assistant message currently being streamed, if any."""
        return self._assembler.message if self._assembler else None

    def apply(self, chunk: StreamChunk) -> None:
        """Apply a stream event to the in-flight assistant message."""
        if isinstance(chunk, ErrorChunk):
            self.fail(chunk.error_text)
            return
        if self.status not in (ChatStatus.SUBMITTED, ChatStatus.STREAMING):
            logger.debug(f"Ignoring {chunk.type} event while {self.status.value}")
            return
        if self._assembler is None:
            message = UIMessage(id=uuid.uuid4().hex, role="assistant")
            self.messages.append(message)
            self._assembler = MessageAssembler(message)
            self.status = ChatStatus.STREAMING
        self._assembler.apply(chunk)
        if isinstance(chunk, FinishChunk):
            self.complete()

    def complete(self) -> None:
        """Finalize the in-flight message and return to ready."""
        if self._assembler is not None:
            self._assembler.close_all()
            self._assembler = None
        if self.status in (ChatStatus.SUBMITTED, ChatStatus.STREAMING):
            self.status = ChatStatus.READY

    def fail(self, error: str) -> None:
        """Record a failed response; the session accepts new input again."""
        if self._assembler is not None:
            self._assembler.close_all()
            self._assembler = None
        self.error = error
        self.status = ChatStatus.ERROR

    def new_chat(self) -> None:
        self.messages.clear()
        self.session_id = str(uuid.uuid4())
        self.status = ChatStatus.READY
        self.error = None
        self._assembler = None
