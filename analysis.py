"""Client for the external text-generation service."""
import asyncio

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_groq import ChatGroq
from langchain_openai import ChatOpenAI
from loguru import logger

from config import Settings
from errors import AnalysisFailure


def build_chat_model(settings: Settings):
    """Create the LangChain chat model for the configured provider.

    Returns None when no API key is configured. Retries are disabled on the
    model itself; the pipeline never retries.
    """
    if not settings.llm_api_key:
        logger.warning(f"No API key configured for provider {settings.llm_provider}; analysis is disabled")
        return None

    if settings.llm_provider == "openai":
        return ChatOpenAI(
            api_key=settings.llm_api_key,
            base_url=settings.llm_base_url,
            model=settings.llm_model,
            temperature=settings.llm_temperature,
            max_tokens=settings.llm_max_tokens,
            max_retries=0,
        )

    return ChatGroq(
        groq_api_key=settings.llm_api_key,
        model_name=settings.llm_model,
        temperature=settings.llm_temperature,
        max_tokens=settings.llm_max_tokens,
        max_retries=0,
    )


class AnalysisClient:
    """Sends a system/user prompt pair to a chat model and returns its text."""

    def __init__(self, llm, timeout: float | None = 60.0):
        self.llm = llm
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "AnalysisClient":
        return cls(build_chat_model(settings), timeout=settings.analysis_timeout)

    async def analyze(self, system_instruction: str, user_message: str) -> str:
        if self.llm is None:
            raise AnalysisFailure("not_configured", "no chat model configured")

        messages = [
            SystemMessage(content=system_instruction),
            HumanMessage(content=user_message),
        ]

        try:
            response = await asyncio.wait_for(self.llm.ainvoke(messages), timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            logger.error(f"Analysis service timed out after {self.timeout}s")
            raise AnalysisFailure("timeout", f"no response within {self.timeout}s") from exc
        except Exception as exc:
            logger.error(f"Analysis service call failed: {exc!r}")
            raise AnalysisFailure("upstream_error", str(exc)) from exc

        content = getattr(response, "content", None)
        if not isinstance(content, str) or not content.strip():
            logger.error(f"Analysis service returned an unusable response: {response!r}")
            raise AnalysisFailure("malformed_response", "empty or non-text completion")

        return content
