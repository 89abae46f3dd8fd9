"""Unit tests for environment-driven settings."""

import pytest

from config import ARK_BASE_URL, load_settings

ENV_VARS = [
    "LLM_PROVIDER", "LLM_MODEL", "GROQ_API_KEY", "OPENAI_API_KEY", "ARK_API_KEY",
    "OPENAI_BASE_URL", "LLM_TEMPERATURE", "LLM_MAX_TOKENS", "ANALYSIS_TIMEOUT_SECONDS",
    "MAX_NARRATIVE_CHARS", "CORS_ORIGINS", "LOG_LEVEL", "DEBUG",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestLoadSettings:
    def test_defaults(self):
        settings = load_settings()

        assert settings.llm_provider == "groq"
        assert settings.llm_model == "llama-3.1-8b-instant"
        assert settings.llm_api_key is None
        assert settings.analysis_timeout == 60.0
        assert settings.max_narrative_chars == 0
        assert settings.cors_origins == ["*"]
        assert settings.debug is False

    def test_groq_key(self, monkeypatch):
        monkeypatch.setenv("GROQ_API_KEY", "gsk_test")

        assert load_settings().llm_api_key == "gsk_test"

    def test_openai_compatible_falls_back_to_ark_key(self, monkeypatch):
        monkeypatch.setenv("LLM_PROVIDER", "OpenAI")
        monkeypatch.setenv("ARK_API_KEY", "ark-test")

        settings = load_settings()

        assert settings.llm_provider == "openai"
        assert settings.llm_api_key == "ark-test"
        assert settings.llm_base_url == ARK_BASE_URL
        assert settings.llm_model == "doubao-seed-1-6-251015"

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("LLM_MODEL", "llama-3.3-70b-versatile")
        monkeypatch.setenv("ANALYSIS_TIMEOUT_SECONDS", "12.5")
        monkeypatch.setenv("MAX_NARRATIVE_CHARS", "2000")
        monkeypatch.setenv("CORS_ORIGINS", "https://dream.example.com, http://localhost:5173")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("DEBUG", "true")

        settings = load_settings()

        assert settings.llm_model == "llama-3.3-70b-versatile"
        assert settings.analysis_timeout == 12.5
        assert settings.max_narrative_chars == 2000
        assert settings.cors_origins == ["https://dream.example.com", "http://localhost:5173"]
        assert settings.log_level == "DEBUG"
        assert settings.debug is True

    def test_unknown_provider(self, monkeypatch):
        monkeypatch.setenv("LLM_PROVIDER", "ollama")

        with pytest.raises(RuntimeError, match="Unsupported LLM_PROVIDER"):
            load_settings()
