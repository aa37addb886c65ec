from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, TypeAdapter, field_validator

from chatstream.models.messages import MessageMetadata, UIMessage, WireModel

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_OUTPUT_TOKENS = 10000
MAX_OUTPUT_TOKENS_LIMIT = 65536

SSE_DONE = "data: [DONE]\n\n"


class ChatStatus(str, Enum):
    """Status values of a chat conversation in the UI."""

    READY = "ready"
    SUBMITTED = "submitted"
    STREAMING = "streaming"
    ERROR = "error"


class GenerationSettings(BaseModel):
    """Per-request generation settings chosen in the UI sidebar."""

    model: str = DEFAULT_MODEL
    temperature: float = Field(default=DEFAULT_TEMPERATURE, ge=0.0, le=1.0)
    max_output_tokens: int = Field(
        default=DEFAULT_MAX_OUTPUT_TOKENS, ge=1, le=MAX_OUTPUT_TOKENS_LIMIT
    )
    system_prompt: str = "Sei un assistente AI che risponde in Italiano."


class ChatRequest(WireModel):
    """Request payload for the chat streaming endpoint.

    Attributes:
        id: Conversation identifier chosen by the client.
        messages: Full conversation history, oldest first.
        temperature: Sampling temperature (0.0 - 1.0).
        max_output_tokens: Maximum tokens in the generated response.
        model: Model identifier; None selects the default model.
        system_prompt: Instructions for the model; None selects the default.
    """

    id: str | int | None = None
    messages: list[UIMessage] = Field(..., min_length=1)
    temperature: float = Field(default=DEFAULT_TEMPERATURE, ge=0.0, le=1.0)
    max_output_tokens: int = Field(
        default=DEFAULT_MAX_OUTPUT_TOKENS, ge=1, le=MAX_OUTPUT_TOKENS_LIMIT
    )
    model: str | None = None
    system_prompt: str | None = None

    @field_validator("model", "system_prompt", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        """Treat an empty or whitespace-only value as absent."""
        if isinstance(v, str) and not v.strip():
            return None
        return v


class WelcomeResponse(BaseModel):
    """Response of the welcome smoke-test endpoint."""

    message: str


class StreamChunkBase(WireModel):
    """Base for every event of the UI message stream."""

    def to_sse(self) -> str:
        """Encode this event as one Server-Sent-Events frame."""
        return f"data: {self.model_dump_json(by_alias=True, exclude_none=True)}\n\n"


class StartChunk(StreamChunkBase):
    type: Literal["start"] = "start"
    message_id: str | None = None
    message_metadata: MessageMetadata | None = None


class StartStepChunk(StreamChunkBase):
    type: Literal["start-step"] = "start-step"


class FinishStepChunk(StreamChunkBase):
    type: Literal["finish-step"] = "finish-step"


class TextStartChunk(StreamChunkBase):
    type: Literal["text-start"] = "text-start"
    id: str


class TextDeltaChunk(StreamChunkBase):
    type: Literal["text-delta"] = "text-delta"
    id: str
    delta: str


class TextEndChunk(StreamChunkBase):
    type: Literal["text-end"] = "text-end"
    id: str


class ReasoningStartChunk(StreamChunkBase):
    type: Literal["reasoning-start"] = "reasoning-start"
    id: str


class ReasoningDeltaChunk(StreamChunkBase):
    type: Literal["reasoning-delta"] = "reasoning-delta"
    id: str
    delta: str


class ReasoningEndChunk(StreamChunkBase):
    type: Literal["reasoning-end"] = "reasoning-end"
    id: str


class SourceUrlChunk(StreamChunkBase):
    type: Literal["source-url"] = "source-url"
    source_id: str
    url: str
    title: str | None = None


class SourceDocumentChunk(StreamChunkBase):
    type: Literal["source-document"] = "source-document"
    source_id: str
    media_type: str
    title: str
    filename: str | None = None


class FileChunk(StreamChunkBase):
    type: Literal["file"] = "file"
    url: str
    media_type: str


class MessageMetadataChunk(StreamChunkBase):
    type: Literal["message-metadata"] = "message-metadata"
    message_metadata: MessageMetadata


class FinishChunk(StreamChunkBase):
    """Terminal event of a successful generation, carrying usage totals."""

    type: Literal["finish"] = "finish"
    message_metadata: MessageMetadata | None = None


class ErrorChunk(StreamChunkBase):
    """Terminal event of a failed generation."""

    type: Literal["error"] = "error"
    error_text: str


StreamChunk = Annotated[
    StartChunk
    | StartStepChunk
    | FinishStepChunk
    | TextStartChunk
    | TextDeltaChunk
    | TextEndChunk
    | ReasoningStartChunk
    | ReasoningDeltaChunk
    | ReasoningEndChunk
    | SourceUrlChunk
    | SourceDocumentChunk
    | FileChunk
    | MessageMetadataChunk
    | FinishChunk
    | ErrorChunk,
    Field(discriminator="type"),
]

_stream_chunk_adapter: TypeAdapter[StreamChunk] = TypeAdapter(StreamChunk)


def parse_stream_chunk(data: str | bytes | dict[str, Any]) -> StreamChunk:
    """Validate one decoded stream event (JSON text or dict).

    Raises:
        pydantic.ValidationError: If the payload is not a known event.
    """
    if isinstance(data, dict):
        return _stream_chunk_adapter.validate_python(data)
    return _stream_chunk_adapter.validate_json(data)
