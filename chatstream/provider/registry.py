"""Registry of the hosted models the chat route can address by name."""

import logging
from collections.abc import Callable

from agno.models.base import Model
from agno.models.google import Gemini

from chatstream.provider.config import ProviderConfig

logger = logging.getLogger(__name__)

ModelFactory = Callable[[float, int], Model]


class UnknownModelError(KeyError):
    """Raised when a request names a model that is not registered."""


class ModelRegistry:
    """Maps model identifiers to factories of configured Agno models.

    Built once at application startup and shared by reference. Each request
    gets a fresh model instance carrying its own sampling settings, so the
    registry itself holds no per-request state.
    """

    def __init__(self, config: ProviderConfig) -> None:
        self._config = config
        self._factories: dict[str, ModelFactory] = {
            name: self._gemini_factory(name) for name in config.models
        }
        logger.info(f"Model registry ready: {', '.join(self._factories)}")

    def _gemini_factory(self, name: str) -> ModelFactory:
        def build(temperature: float, max_output_tokens: int) -> Model:
            return Gemini(
                id=name,
                api_key=self._config.api_key,
                temperature=temperature,
                max_output_tokens=max_output_tokens,
                include_thoughts=self._config.send_reasoning,
            )

        return build

    def register(self, name: str, factory: ModelFactory) -> None:
        """Add or replace the factory for a model identifier."""
        self._factories[name] = factory

    @property
    def names(self) -> list[str]:
        """Registered model identifiers, in registration order."""
        return list(self._factories)

    def create(self, name: str, temperature: float, max_output_tokens: int) -> Model:
        """Build a model instance for one generation.

        Raises:
            UnknownModelError: If no model is registered under ``name``.
        """
        try:
            factory = self._factories[name]
        except KeyError:
            raise UnknownModelError(name) from None
        return factory(temperature, max_output_tokens)
