"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - fake_chat_service: Scripted stand-in for the model provider
    - app: FastAPI application wired to the fake service
    - async_client: HTTPX client for API testing
    - chat_payload: Minimal valid chat request body
    - user: Simulated NiceGUI user (nicegui.testing.user_plugin)
"""

from collections.abc import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from chatstream.api.app import create_app
from chatstream.models.messages import Usage
from chatstream.models.schemas import DEFAULT_MODEL, ChatRequest
from chatstream.provider.config import AVAILABLE_MODELS, DEFAULT_SYSTEM_PROMPT
from chatstream.provider.events import GenerationFinished, ProviderEvent, TextDelta

pytest_plugins = ["nicegui.testing.user_plugin"]


class FakeChatService:
    """Replays scripted provider events, optionally failing afterwards."""

    def __init__(
        self,
        events: list[ProviderEvent] | None = None,
        error: BaseException | None = None,
        send_reasoning: bool = True,
        send_sources: bool = True,
    ) -> None:
        self.events = events if events is not None else []
        self.error = error
        self.models = list(AVAILABLE_MODELS)
        self.send_reasoning = send_reasoning
        self.send_sources = send_sources
        self.requests: list[ChatRequest] = []

    def resolve_model(self, model: str | None) -> str:
        return model or DEFAULT_MODEL

    def resolve_system_prompt(self, system_prompt: str | None) -> str:
        return system_prompt or DEFAULT_SYSTEM_PROMPT

    async def stream(self, request: ChatRequest) -> AsyncGenerator[ProviderEvent]:
        self.requests.append(request)
        for event in self.events:
            yield event
        if self.error is not None:
            raise self.error


@pytest.fixture
def fake_chat_service() -> FakeChatService:
    """Service answering "Ciao!" in two deltas with usage totals."""
    return FakeChatService(
        events=[
            TextDelta(text="Cia"),
            TextDelta(text="o!"),
            GenerationFinished(
                usage=Usage(input_tokens=10, output_tokens=5, total_tokens=15, reasoning_tokens=0)
            ),
        ]
    )


@pytest.fixture
def app(fake_chat_service: FakeChatService) -> FastAPI:
    return create_app(chat_service=fake_chat_service)


@pytest.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def chat_payload() -> dict:
    """Minimal valid body for POST /api/chat."""
    return {
        "id": "test-session-12345",
        "messages": [
            {"id": "m1", "role": "user", "parts": [{"type": "text", "text": "Ciao"}]}
        ],
        "temperature": 0.7,
        "maxOutputTokens": 10000,
        "model": "gemini-2.5-flash",
        "systemPrompt": "",
    }
