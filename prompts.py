"""Prompt construction per interpretive school."""
from typing import NamedTuple

from langchain_core.prompts import PromptTemplate
from loguru import logger

from knowledge import DEFAULT_SCHOOL, DREAM_SYMBOLS, SCHOOL_PROFILES, SchoolProfile, serialize_lexicon

USER_PROMPT = PromptTemplate.from_template(
    "【梦境描述】：{dream_text}\n\n请结合上述梦境符号知识库，对这个梦境进行深度解析。"
)


class DreamPrompt(NamedTuple):
    system_instruction: str
    user_message: str


def resolve_profile(school_id: str | None) -> SchoolProfile:
    """Look up a school profile, falling back to ``DEFAULT_SCHOOL``.

    An unknown or misspelled school is not an error: the caller still gets an
    analysis, just from the default stance.
    """
    profile = SCHOOL_PROFILES.get(school_id or "")
    if profile is None:
        logger.debug(f"Unknown school {school_id!r}, using {DEFAULT_SCHOOL}")
        profile = SCHOOL_PROFILES[DEFAULT_SCHOOL]
    return profile


def build_system_instruction(profile: SchoolProfile, lexicon=DREAM_SYMBOLS) -> str:
    template = PromptTemplate.from_template(profile.prompt_template)
    return template.format(lexicon=serialize_lexicon(lexicon))


def compose_prompt(school: str | None, dream_text: str) -> DreamPrompt:
    # dream_text goes in verbatim; length policing happens at the request boundary
    profile = resolve_profile(school)
    return DreamPrompt(
        system_instruction=build_system_instruction(profile),
        user_message=USER_PROMPT.format(dream_text=dream_text),
    )
