"""Integration tests for the NiceGUI chat page.

Uses NiceGUI's simulated ``user`` fixture; the HTTP stream is replaced by a
scripted reply that waits on a gate so the page can be inspected mid-stream.
"""

import asyncio
from unittest.mock import patch

import pytest_check as check
from nicegui import ui
from nicegui.testing import User

from chatstream.models.messages import MessageMetadata, Usage
from chatstream.models.schemas import (
    ChatRequest,
    FinishChunk,
    FinishStepChunk,
    StartChunk,
    StartStepChunk,
    TextDeltaChunk,
    TextEndChunk,
    TextStartChunk,
)
from chatstream.ui.chat_page import build_chat_page


def gated_reply(gate: asyncio.Event, requests: list[ChatRequest]):
    """Build a stand-in for stream_chat_response that pauses after the first delta."""

    async def stream(request: ChatRequest):
        requests.append(request)
        yield StartChunk()
        yield StartStepChunk()
        yield TextStartChunk(id="t1")
        yield TextDeltaChunk(id="t1", delta="Cia")
        await gate.wait()
        yield TextDeltaChunk(id="t1", delta="o!")
        yield TextEndChunk(id="t1")
        yield FinishStepChunk()
        yield FinishChunk(
            message_metadata=MessageMetadata(total_usage=Usage(total_tokens=15))
        )

    return stream


def only(user: User, marker: str):
    (element,) = user.find(marker=marker).elements
    return element


async def test_controls_are_disabled_while_streaming(user: User) -> None:
    gate = asyncio.Event()
    requests: list[ChatRequest] = []
    ui.page("/")(build_chat_page)

    with patch(
        "chatstream.ui.chat_page.stream_chat_response", gated_reply(gate, requests)
    ):
        await user.open("/")
        check.is_false(only(user, "send").enabled)

        user.find(marker="message-input").type("Ciao")
        check.is_true(only(user, "send").enabled)

        user.find(marker="send").click()
        await user.should_see("Caricamento...")
        check.is_false(only(user, "message-input").enabled)
        check.is_false(only(user, "send").enabled)

        gate.set()
        await user.should_see("Tokens utilizzati: 15")
        await user.should_not_see("Caricamento...")

    check.is_true(only(user, "message-input").enabled)
    check.is_false(only(user, "send").enabled)
    check.equal([m.text for m in requests[0].messages], ["Ciao"])
