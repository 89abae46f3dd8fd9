"""Environment-driven settings."""
import os

from pydantic import BaseModel

PROVIDER_DEFAULT_MODELS = {
    "groq": "llama-3.1-8b-instant",
    "openai": "doubao-seed-1-6-251015",
}

ARK_BASE_URL = "https://ark.cn-beijing.volces.com/api/v3"


class Settings(BaseModel):
    llm_provider: str = "groq"
    llm_model: str = PROVIDER_DEFAULT_MODELS["groq"]
    llm_api_key: str | None = None
    llm_base_url: str | None = None
    llm_temperature: float = 0.7
    llm_max_tokens: int = 1024
    analysis_timeout: float = 60.0
    # 0 disables the limit
    max_narrative_chars: int = 0
    cors_origins: list[str] = ["*"]
    log_level: str = "INFO"
    debug: bool = False


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_settings() -> Settings:
    """Read settings from the process environment."""
    provider = os.getenv("LLM_PROVIDER", "groq").strip().lower()
    if provider not in PROVIDER_DEFAULT_MODELS:
        raise RuntimeError(f"Unsupported LLM_PROVIDER: {provider!r} (expected groq or openai)")

    if provider == "groq":
        api_key = os.getenv("GROQ_API_KEY")
        base_url = None
    else:
        api_key = os.getenv("OPENAI_API_KEY") or os.getenv("ARK_API_KEY")
        base_url = os.getenv("OPENAI_BASE_URL", ARK_BASE_URL)

    origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

    return Settings(
        llm_provider=provider,
        llm_model=os.getenv("LLM_MODEL", PROVIDER_DEFAULT_MODELS[provider]),
        llm_api_key=api_key or None,
        llm_base_url=base_url,
        llm_temperature=float(os.getenv("LLM_TEMPERATURE", "0.7")),
        llm_max_tokens=int(os.getenv("LLM_MAX_TOKENS", "1024")),
        analysis_timeout=float(os.getenv("ANALYSIS_TIMEOUT_SECONDS", "60")),
        max_narrative_chars=int(os.getenv("MAX_NARRATIVE_CHARS", "0")),
        cors_origins=origins or ["*"],
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        debug=_env_bool("DEBUG"),
    )
