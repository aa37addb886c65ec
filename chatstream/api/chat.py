"""Chat endpoints: welcome stub and streaming chat relay."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import StreamingResponse

from chatstream.api.stream import SSE_HEADERS, UIMessageStreamWriter, ui_message_stream
from chatstream.models.schemas import ChatRequest, WelcomeResponse
from chatstream.provider.chat_agent import ChatService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])


def get_chat_service(request: Request) -> ChatService:
    """Return the chat service created during application startup.

    Raises:
        HTTPException: 503 if the service was not initialized.
    """
    service: ChatService | None = getattr(request.app.state, "chat_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Chat service is not initialized",
        )
    return service


@router.get("/welcome", response_model=WelcomeResponse)
async def welcome() -> WelcomeResponse:
    """Smoke-test endpoint."""
    return WelcomeResponse(message="Hello from API")


@router.post("/chat")
async def chat(
    payload: ChatRequest,
    service: ChatService = Depends(get_chat_service),
) -> StreamingResponse:
    """Stream a model reply for the given conversation.

    The body is a UI message stream: one JSON event per SSE frame (text and
    reasoning deltas, citations, files), a terminal ``finish`` event carrying
    token usage, then ``[DONE]``. Generation failures are reported as an
    ``error`` event inside the stream.

    Raises:
        422: Invalid payload or unknown model.
    """
    logger.info(
        f"/api/chat id={payload.id} messages={len(payload.messages)} "
        f"temperature={payload.temperature} max_output_tokens={payload.max_output_tokens} "
        f"model={payload.model}"
    )

    model = service.resolve_model(payload.model)
    if model not in service.models:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown model {model!r}. Available: {', '.join(service.models)}",
        )

    writer = UIMessageStreamWriter(
        send_reasoning=service.send_reasoning,
        send_sources=service.send_sources,
    )
    return StreamingResponse(
        ui_message_stream(service.stream(payload), writer),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
