"""LLM prompt templates for the interview chat and session wrap-up."""

from .interview import (
    PROMPT_INTERVIEW_BASE,
    PROMPT_LIFE_STORY_SUFFIX,
    PROMPT_MISSING_SUFFIX,
    PROMPT_SESSION_SUMMARY,
    build_system_prompt,
    fill_summary_request,
)

__all__ = [
    "PROMPT_INTERVIEW_BASE",
    "PROMPT_LIFE_STORY_SUFFIX",
    "PROMPT_MISSING_SUFFIX",
    "PROMPT_SESSION_SUMMARY",
    "build_system_prompt",
    "fill_summary_request",
]
