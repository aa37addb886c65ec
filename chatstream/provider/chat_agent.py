"""Agno chat service relaying one conversation to a hosted model.

Core module for turning a conversation plus generation settings into a stream
of provider events.

Architecture Decisions:

1. **Stateless Agent per request** - The browser owns the conversation and sends
   the full history every time. No Agno storage is configured, so nothing
   leaks between requests or sessions.

2. **Registry instead of module-level models** - Model instances carry the
   per-request temperature and token limit. The service asks the shared
   ModelRegistry for a fresh instance on every call.

3. **Event generator instead of callbacks** - Agno yields run events with
   metadata. We map them onto a small set of provider events (text, reasoning,
   sources, files, finish) and raise on run errors, leaving wire encoding and
   error reporting to the stream writer.
"""

import base64
import binascii
import logging
from collections.abc import AsyncGenerator
from typing import Any
from urllib.parse import unquote_to_bytes

from agno.agent import Agent
from agno.media import Image
from agno.models.base import Model
from agno.models.message import Message
from agno.run.agent import RunEvent

from chatstream.models.messages import FilePart, TextPart, UIMessage, Usage
from chatstream.models.schemas import ChatRequest
from chatstream.provider.config import ProviderConfig
from chatstream.provider.events import (
    GeneratedFile,
    GenerationFinished,
    ModelProviderError,
    ProviderEvent,
    ReasoningDelta,
    SourceDocument,
    SourceUrl,
    TextDelta,
)
from chatstream.provider.registry import ModelRegistry

logger = logging.getLogger(__name__)


def _image_from_file_part(part: FilePart) -> Image:
    """Build an Agno image from a data URL or a remote URL."""
    if part.url.startswith("data:"):
        header, _, payload = part.url.partition(",")
        params = header[len("data:"):].split(";")
        if "base64" in params[1:]:
            try:
                content = base64.b64decode(payload, validate=True)
            except (binascii.Error, ValueError) as e:
                raise ValueError(f"Invalid image data URL: {e}") from e
        else:
            content = unquote_to_bytes(payload)
        return Image(content=content, mime_type=params[0] or part.media_type)
    return Image(url=part.url)


def to_provider_messages(messages: list[UIMessage]) -> list[Message]:
    """Convert UI messages into Agno messages.

    Text parts are concatenated and image files are attached. Reasoning and
    citation parts are display-only and are not sent back to the model.
    Messages left without any content are skipped.
    """
    converted: list[Message] = []
    for message in messages:
        text = "".join(p.text for p in message.parts if isinstance(p, TextPart))
        images = [
            _image_from_file_part(p)
            for p in message.parts
            if isinstance(p, FilePart) and p.media_type.startswith("image/")
        ]
        if not text and not images:
            continue
        converted.append(
            Message(role=message.role, content=text, images=images or None)
        )
    return converted


def _usage_from_metrics(metrics: Any) -> Usage | None:
    if metrics is None:
        return None
    return Usage(
        input_tokens=getattr(metrics, "input_tokens", 0) or 0,
        output_tokens=getattr(metrics, "output_tokens", 0) or 0,
        total_tokens=getattr(metrics, "total_tokens", 0) or 0,
        reasoning_tokens=getattr(metrics, "reasoning_tokens", 0) or 0,
    )


def _citation_events(citations: Any, seen: set[str]) -> list[ProviderEvent]:
    """Extract not-yet-seen URL and document citations from an Agno event."""
    if citations is None:
        return []
    events: list[ProviderEvent] = []
    for citation in getattr(citations, "urls", None) or []:
        url = getattr(citation, "url", None)
        if url and url not in seen:
            seen.add(url)
            events.append(SourceUrl(url=url, title=getattr(citation, "title", None)))
    for document in getattr(citations, "documents", None) or []:
        title = getattr(document, "document_title", None) or getattr(document, "title", None)
        if title and title not in seen:
            seen.add(title)
            events.append(
                SourceDocument(title=title, filename=getattr(document, "filename", None))
            )
    return events


def _image_events(image: Any) -> list[ProviderEvent]:
    """Turn a generated Agno image into a file event."""
    if image is None:
        return []
    mime_type = getattr(image, "mime_type", None) or "image/png"
    if url := getattr(image, "url", None):
        return [GeneratedFile(url=url, media_type=mime_type)]
    if content := getattr(image, "content", None):
        encoded = base64.b64encode(content).decode("ascii")
        return [GeneratedFile(url=f"data:{mime_type};base64,{encoded}", media_type=mime_type)]
    return []


class ChatService:
    """Streams model output for a chat request.

    Wraps Agno's Agent with:
    - Per-request model selection through the ModelRegistry
    - Default system prompt fallback
    - Translation of Agno run events into provider events
    """

    def __init__(self, registry: ModelRegistry, config: ProviderConfig) -> None:
        """Initialize the chat service.

        Args:
            registry: Shared model registry built at startup.
            config: Provider configuration.
        """
        self._registry = registry
        self._config = config

    @property
    def models(self) -> list[str]:
        """Model identifiers accepted by this service."""
        return self._registry.names

    @property
    def send_reasoning(self) -> bool:
        return self._config.send_reasoning

    @property
    def send_sources(self) -> bool:
        return self._config.send_sources

    def resolve_model(self, model: str | None) -> str:
        """Return the requested model name, or the configured default."""
        return model or self._config.default_model

    def resolve_system_prompt(self, system_prompt: str | None) -> str:
        """Return the request's system prompt, or the configured default."""
        if system_prompt and system_prompt.strip():
            return system_prompt
        return self._config.default_system_prompt

    def _create_agent(self, model: Model, system_prompt: str) -> Agent:
        """Create a stateless Agno agent for one generation."""
        return Agent(
            model=model,
            system_message=system_prompt,
            telemetry=False,
        )

    async def stream(self, request: ChatRequest) -> AsyncGenerator[ProviderEvent]:
        """Stream provider events for a chat request.

        Args:
            request: Conversation history and generation settings.

        Yields:
            Text and reasoning deltas, citations, generated files, and a final
            GenerationFinished event carrying token usage.

        Raises:
            UnknownModelError: If the requested model is not registered.
            ModelProviderError: If the model reports a failed run.
        """
        model = self._registry.create(
            self.resolve_model(request.model), request.temperature, request.max_output_tokens
        )
        agent = self._create_agent(model, self.resolve_system_prompt(request.system_prompt))
        messages = to_provider_messages(request.messages)

        usage: Usage | None = None
        seen_sources: set[str] = set()

        async for chunk in agent.arun(messages, stream=True, stream_events=True):
            event = getattr(chunk, "event", None)

            if event == RunEvent.run_error:
                raise ModelProviderError(getattr(chunk, "content", None) or "unknown error")

            if event == RunEvent.run_completed:
                usage = _usage_from_metrics(getattr(chunk, "metrics", None)) or usage
                continue

            if event != RunEvent.run_content:
                continue

            if reasoning := getattr(chunk, "reasoning_content", None):
                yield ReasoningDelta(text=reasoning)
            content = getattr(chunk, "content", None)
            if isinstance(content, str) and content:
                yield TextDelta(text=content)
            for source_event in _citation_events(getattr(chunk, "citations", None), seen_sources):
                yield source_event
            for file_event in _image_events(getattr(chunk, "image", None)):
                yield file_event

        yield GenerationFinished(usage=usage)
