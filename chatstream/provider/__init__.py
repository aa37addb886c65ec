"""Model provider access through Agno.

Responsibilities:
    - Provider configuration loaded from the environment
    - Registry of selectable hosted models, built once at startup
    - Conversion of UI messages into provider messages
    - Streaming generation as provider events

Maintains clean separation from the HTTP layer.
"""

from chatstream.provider.chat_agent import ChatService
from chatstream.provider.config import ProviderConfig, get_provider_config
from chatstream.provider.registry import ModelRegistry, UnknownModelError

__all__ = [
    "ChatService",
    "ModelRegistry",
    "ProviderConfig",
    "UnknownModelError",
    "get_provider_config",
]
