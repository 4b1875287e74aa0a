"""
Unit tests for AdvisorSettings.
"""

import pytest

from chat_backend.config import (
    DEFAULT_GENERATION_MODEL_ID,
    GENERATION_MAX_TOKENS,
    GENERATION_TEMPERATURE,
    AdvisorSettings,
)


class TestAdvisorSettingsFromEnv:
    def test_missing_api_key_is_fatal(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)

        with pytest.raises(RuntimeError, match="OPENAI_API_KEY"):
            AdvisorSettings.from_env()

    def test_blank_api_key_is_fatal(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "   ")

        with pytest.raises(RuntimeError):
            AdvisorSettings.from_env()

    def test_defaults(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-abc")
        for name in ["GENERATION_MODEL_ID", "ALLOWED_ORIGINS", "VERIFY_OPENAI_API_KEY",
                     "CHAT_BACKEND_HOST", "CHAT_BACKEND_PORT"]:
            monkeypatch.delenv(name, raising=False)

        settings = AdvisorSettings.from_env()

        assert settings.openai_api_key.get_secret_value() == "sk-abc"
        assert settings.generation_model_id == DEFAULT_GENERATION_MODEL_ID
        assert settings.temperature == GENERATION_TEMPERATURE == 0.7
        assert settings.max_tokens == GENERATION_MAX_TOKENS == 1000
        assert settings.allowed_origins == ["*"]
        assert settings.verify_api_key is False
        assert settings.port == 8001

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-abc")
        monkeypatch.setenv("GENERATION_MODEL_ID", "gpt-4o")
        monkeypatch.setenv("ALLOWED_ORIGINS", "http://a.example, http://b.example,")
        monkeypatch.setenv("VERIFY_OPENAI_API_KEY", "true")
        monkeypatch.setenv("CHAT_BACKEND_PORT", "9000")

        settings = AdvisorSettings.from_env()

        assert settings.generation_model_id == "gpt-4o"
        assert settings.allowed_origins == ["http://a.example", "http://b.example"]
        assert settings.verify_api_key is True
        assert settings.port == 9000

    def test_api_key_is_not_shown_in_repr(self):
        settings = AdvisorSettings(openai_api_key="sk-secret")

        assert "sk-secret" not in repr(settings)
