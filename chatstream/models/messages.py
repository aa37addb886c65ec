"""Conversation message models shared by the API and the UI.

Messages carry an ordered list of parts. Each part is one case of a tagged
variant discriminated on ``type``; JSON field names are camelCase.
"""

import logging
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)


class WireModel(BaseModel):
    """Base model using camelCase on the wire and snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        """Serialize with wire aliases, omitting unset optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class TextPart(WireModel):
    """A fragment of formatted (markdown) answer text."""

    type: Literal["text"] = "text"
    text: str = ""
    state: Literal["streaming", "done"] | None = None


class ReasoningPart(WireModel):
    """A fragment of model reasoning, rendered preformatted."""

    type: Literal["reasoning"] = "reasoning"
    text: str = ""
    state: Literal["streaming", "done"] | None = None


class SourceUrlPart(WireModel):
    """A citation pointing at a web page."""

    type: Literal["source-url"] = "source-url"
    source_id: str
    url: str
    title: str | None = None


class SourceDocumentPart(WireModel):
    """A citation pointing at a document."""

    type: Literal["source-document"] = "source-document"
    source_id: str
    media_type: str
    title: str
    filename: str | None = None


class FilePart(WireModel):
    """A file attached to or generated for a message.

    Images use an ``image/*`` media type and a data or http(s) URL.
    """

    type: Literal["file"] = "file"
    media_type: str
    url: str
    filename: str | None = None


MessagePart = Annotated[
    TextPart | ReasoningPart | SourceUrlPart | SourceDocumentPart | FilePart,
    Field(discriminator="type"),
]

KNOWN_PART_TYPES = frozenset(
    {"text", "reasoning", "source-url", "source-document", "file"}
)


class Usage(WireModel):
    """Token accounting for one finished generation."""

    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0
    reasoning_tokens: int = 0


class MessageMetadata(WireModel):
    """Metadata attached to an assistant message once generation completes."""

    total_usage: Usage | None = None


class UIMessage(WireModel):
    """A single message in the conversation.

    Attributes:
        id: Message identifier.
        role: The speaker (user, assistant, or system).
        parts: Ordered content fragments.
        metadata: Usage metadata for finished assistant messages.
    """

    id: str = ""
    role: Literal["user", "assistant", "system"]
    parts: list[MessagePart] = Field(default_factory=list)
    metadata: MessageMetadata | None = None

    @field_validator("parts", mode="before")
    @classmethod
    def drop_unknown_parts(cls, v: Any) -> Any:
        """Ignore part kinds this application does not render."""
        if not isinstance(v, list):
            return v
        kept = []
        for part in v:
            if isinstance(part, dict) and part.get("type") not in KNOWN_PART_TYPES:
                logger.debug(f"Ignoring message part of type {part.get('type')!r}")
                continue
            kept.append(part)
        return kept

    @property
    def text(self) -> str:
        """Concatenated text of all text parts."""
        return "".join(part.text for part in self.parts if isinstance(part, TextPart))
