"""Provider-side generation events.

The chat service translates whatever the model SDK yields into these events;
the stream writer turns them into UI message stream chunks.
"""

from pydantic import BaseModel

from chatstream.models.messages import Usage


class TextDelta(BaseModel):
    text: str


class ReasoningDelta(BaseModel):
    text: str


class SourceUrl(BaseModel):
    url: str
    title: str | None = None


class SourceDocument(BaseModel):
    title: str
    media_type: str = "text/plain"
    filename: str | None = None


class GeneratedFile(BaseModel):
    url: str
    media_type: str


class GenerationFinished(BaseModel):
    """Last event of a successful generation."""

    usage: Usage | None = None


ProviderEvent = (
    TextDelta | ReasoningDelta | SourceUrl | SourceDocument | GeneratedFile | GenerationFinished
)


class ModelProviderError(Exception):
    """Raised when the hosted model reports a failed run."""
