"""Unit tests for ProviderConfig."""

from unittest.mock import patch

import pytest
from pydantic import ValidationError

from chatstream.provider.config import (
    AVAILABLE_MODELS,
    DEFAULT_SYSTEM_PROMPT,
    ProviderConfig,
    get_provider_config,
)


class TestProviderConfig:
    """Tests for ProviderConfig validation."""

    def test_config_with_default_values(self) -> None:
        """Config uses sensible defaults when only API key provided."""
        with patch.dict("os.environ", {}, clear=True):
            config = ProviderConfig(api_key="test-key")

        assert config.models == AVAILABLE_MODELS
        assert config.default_model == "gemini-2.5-flash"
        assert config.default_system_prompt == DEFAULT_SYSTEM_PROMPT
        assert config.send_reasoning is True
        assert config.send_sources is True

    def test_default_system_prompt_is_italian(self) -> None:
        assert DEFAULT_SYSTEM_PROMPT == "Sei un assistente AI che risponde in italiano."

    def test_config_fails_with_missing_api_key(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            ProviderConfig(api_key="")

        assert "API key required" in str(exc_info.value)

    def test_config_fails_with_whitespace_api_key(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            ProviderConfig(api_key="   ")

        assert "API key required" in str(exc_info.value)

    def test_config_strips_api_key_whitespace(self) -> None:
        config = ProviderConfig(api_key="  test-key  ")

        assert config.api_key == "test-key"

    def test_config_rejects_default_model_outside_models(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            ProviderConfig(api_key="test-key", default_model="gpt-4o")

        assert "gpt-4o" in str(exc_info.value)


class TestGetProviderConfig:
    """Tests for get_provider_config reading the environment."""

    def test_reads_google_api_key(self) -> None:
        with patch.dict("os.environ", {"GOOGLE_API_KEY": "env-key"}, clear=True):
            config = get_provider_config()

        assert config.api_key == "env-key"

    def test_falls_back_to_gemini_api_key(self) -> None:
        with patch.dict("os.environ", {"GEMINI_API_KEY": "gemini-key"}, clear=True):
            config = get_provider_config()

        assert config.api_key == "gemini-key"

    def test_fails_without_env_var(self) -> None:
        with patch.dict("os.environ", {}, clear=True), pytest.raises(ValidationError):
            get_provider_config()

    def test_system_prompt_from_environment(self) -> None:
        env = {"GOOGLE_API_KEY": "k", "DEFAULT_SYSTEM_PROMPT": "You answer in English."}
        with patch.dict("os.environ", env, clear=True):
            config = get_provider_config()

        assert config.default_system_prompt == "You answer in English."

    def test_blank_system_prompt_env_uses_default(self) -> None:
        env = {"GOOGLE_API_KEY": "k", "DEFAULT_SYSTEM_PROMPT": "  "}
        with patch.dict("os.environ", env, clear=True):
            config = get_provider_config()

        assert config.default_system_prompt == DEFAULT_SYSTEM_PROMPT

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("false", False), ("0", False), ("no", False), ("true", True), ("1", True), ("", True)],
    )
    def test_send_reasoning_flag(self, value: str, expected: bool) -> None:
        env = {"GOOGLE_API_KEY": "k", "SEND_REASONING": value}
        with patch.dict("os.environ", env, clear=True):
            config = get_provider_config()

        assert config.send_reasoning is expected

    def test_default_model_from_environment(self) -> None:
        env = {"GOOGLE_API_KEY": "k", "CHAT_DEFAULT_MODEL": "gemini-2.5-pro"}
        with patch.dict("os.environ", env, clear=True):
            config = get_provider_config()

        assert config.default_model == "gemini-2.5-pro"
