"""Limits applied when building oracle requests for memory operations."""

from __future__ import annotations

from dataclasses import dataclass

from .env import positive_int_env_var

DEFAULT_MERGE_TEXT_LIMIT = 20_000
DEFAULT_EXTRACTION_TEXT_LIMIT = 12_000
DEFAULT_README_LIMIT = 2_000
DEFAULT_RESEARCH_CONTEXT_LIMIT = 1_000
DEFAULT_QUESTION_COUNT = 3


@dataclass(frozen=True, slots=True)
class MemoryConfig:
    merge_text_limit: int = DEFAULT_MERGE_TEXT_LIMIT
    extraction_text_limit: int = DEFAULT_EXTRACTION_TEXT_LIMIT
    readme_limit: int = DEFAULT_README_LIMIT
    research_context_limit: int = DEFAULT_RESEARCH_CONTEXT_LIMIT
    question_count: int = DEFAULT_QUESTION_COUNT


def get_memory_config() -> MemoryConfig:
    """Defaults, each overridable through a ``CAREERMEM_*`` variable."""

    return MemoryConfig(
        merge_text_limit=positive_int_env_var(
            "CAREERMEM_MERGE_TEXT_LIMIT", DEFAULT_MERGE_TEXT_LIMIT
        ),
        extraction_text_limit=positive_int_env_var(
            "CAREERMEM_EXTRACTION_TEXT_LIMIT", DEFAULT_EXTRACTION_TEXT_LIMIT
        ),
        readme_limit=positive_int_env_var("CAREERMEM_README_LIMIT", DEFAULT_README_LIMIT),
        research_context_limit=positive_int_env_var(
            "CAREERMEM_RESEARCH_CONTEXT_LIMIT", DEFAULT_RESEARCH_CONTEXT_LIMIT
        ),
        question_count=positive_int_env_var("CAREERMEM_QUESTION_COUNT", DEFAULT_QUESTION_COUNT),
    )
