"""Provider configuration with environment variable loading.

Pydantic-based configuration for the hosted Gemini models reached through Agno.
Values are read once, when the configuration object is built at startup.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator, model_validator

from chatstream.models.schemas import DEFAULT_MODEL

# Load environment variables from .env file
load_dotenv()

AVAILABLE_MODELS: tuple[str, ...] = ("gemini-2.5-flash", "gemini-2.5-pro")
DEFAULT_SYSTEM_PROMPT = "Sei un assistente AI che risponde in italiano."


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class ProviderConfig(BaseModel):
    """Configuration for the model provider.

    Attributes:
        api_key: Google AI API key.
        models: Model identifiers the chat route accepts.
        default_model: Model used when a request does not name one.
        default_system_prompt: Instructions used when a request sends none.
        send_reasoning: Forward reasoning fragments to the client.
        send_sources: Forward citations to the client.
    """

    api_key: str = Field(
        default_factory=lambda: os.getenv("GOOGLE_API_KEY", os.getenv("GEMINI_API_KEY", "")),
        description="API key for the Google AI provider",
    )
    models: tuple[str, ...] = Field(
        default=AVAILABLE_MODELS,
        min_length=1,
        description="Selectable model identifiers",
    )
    default_model: str = Field(
        default_factory=lambda: os.getenv("CHAT_DEFAULT_MODEL", DEFAULT_MODEL),
        description="Model used when the request omits one",
    )
    default_system_prompt: str = Field(
        default_factory=lambda: os.getenv("DEFAULT_SYSTEM_PROMPT", "").strip()
        or DEFAULT_SYSTEM_PROMPT,
        description="Fallback system prompt",
    )
    send_reasoning: bool = Field(
        default_factory=lambda: _env_flag("SEND_REASONING", True),
        description="Stream reasoning fragments to the client",
    )
    send_sources: bool = Field(
        default_factory=lambda: _env_flag("SEND_SOURCES", True),
        description="Stream source citations to the client",
    )

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Validate that API key is provided and non-empty."""
        if not v or not v.strip():
            raise ValueError(
                "API key required. Set GOOGLE_API_KEY or GEMINI_API_KEY in .env"
            )
        return v.strip()

    @model_validator(mode="after")
    def validate_default_model(self) -> "ProviderConfig":
        """Ensure the default model is one of the selectable models."""
        if self.default_model not in self.models:
            raise ValueError(
                f"Default model {self.default_model!r} is not one of {list(self.models)}"
            )
        return self


def get_provider_config() -> ProviderConfig:
    """Create provider configuration from environment.

    Returns:
        Configured ProviderConfig instance.

    Raises:
        ValueError: If no API key is set.
    """
    return ProviderConfig()
