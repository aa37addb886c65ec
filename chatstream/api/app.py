"""FastAPI application factory and configuration.

Main application entry point with lifespan management, middleware,
and router registration.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chatstream import __version__
from chatstream.api.chat import router as chat_router
from chatstream.provider.chat_agent import ChatService
from chatstream.provider.config import get_provider_config
from chatstream.provider.registry import ModelRegistry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application startup and shutdown lifecycle.

    Builds the provider configuration and model registry once and shares the
    chat service with every request through ``app.state``.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    # Startup
    logger.info("Starting chat API...")
    if getattr(app.state, "chat_service", None) is None:
        config = get_provider_config()
        app.state.chat_service = ChatService(ModelRegistry(config), config)
    yield
    # Shutdown
    logger.info("Shutting down chat API...")


def create_app(chat_service: ChatService | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        chat_service: Optional pre-built service; built at startup otherwise.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="Chatstream API",
        description=(
            "Relays a browser chat conversation to a hosted language model and "
            "streams the reply back as an incrementally-parseable message stream "
            "with reasoning, citations, and token usage."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    application.state.chat_service = chat_service

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    application.include_router(chat_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "chatstream"}

    return application


app = create_app()
