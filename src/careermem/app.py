"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from careermem.adapters.documents import extract_document_text
from careermem.adapters.gemini import GeminiClient
from careermem.adapters.github import GitHubFetcher
from careermem.adapters.sqlalchemy import SqlAlchemyMemoryUnitOfWork, is_started, startup
from careermem.config import get_gemini_config, get_memory_config
from careermem.domain.memory_service import MemoryService
from careermem.domain.ports import MemoryUnitOfWork
from careermem.domain.reconciliation import DEFAULT_ENHANCE_CONTEXT, ReconciliationEngine

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from careermem.config import GeminiConfig, MemoryConfig
    from careermem.domain.memory_service import FileIngestResult
    from careermem.domain.model import (
        ContentEnhancement,
        MemoryProfile,
        QnAAnswer,
        ResumeDocument,
        SectionType,
    )
    from careermem.domain.ports import ExternalRepositoryFetcher
    from careermem.domain.reconciliation import MergeResult

UnitOfWorkFactory = Callable[[], MemoryUnitOfWork]
EngineFactory = Callable[[], ReconciliationEngine]

log = getLogger(__name__)


def build_reconciliation_engine(
    *,
    gemini: GeminiConfig | None = None,
    memory: MemoryConfig | None = None,
) -> ReconciliationEngine:
    """Build an engine talking to Gemini; raises if ``GEMINI_API_KEY`` is missing."""

    gemini_config = gemini or get_gemini_config()
    limits = memory or get_memory_config()
    return ReconciliationEngine(
        GeminiClient(gemini_config),
        merge_text_limit=limits.merge_text_limit,
        extraction_text_limit=limits.extraction_text_limit,
        readme_limit=limits.readme_limit,
        research_context_limit=limits.research_context_limit,
    )


def build_memory_service(
    *,
    engine_factory: EngineFactory | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> MemoryService:
    if unit_of_work_factory is None:
        if not is_started():
            startup()
        unit_of_work_factory = SqlAlchemyMemoryUnitOfWork
    return MemoryService(
        engine_factory=engine_factory or build_reconciliation_engine,
        unit_of_work_factory=unit_of_work_factory,
        extract_text=extract_document_text,
    )


def ingest_files(
    paths: Sequence[Path],
    *,
    user_id: str,
    service: MemoryService | None = None,
) -> FileIngestResult:
    """Read local files and merge their text into the user's memory."""

    active = service or build_memory_service()
    files = {path.name: path.read_bytes() for path in paths}
    log.info("Ingesting %d files for user %s", len(files), user_id)
    result = asyncio.run(active.ingest_files(user_id, files))
    log.info(
        "Finished ingest: merged=%s, skipped=%s, %s",
        result.merged_files,
        result.skipped_files,
        result.merge.report.summary(),
    )
    return result


def answer_questions(
    answers: Sequence[QnAAnswer],
    *,
    user_id: str,
    service: MemoryService | None = None,
) -> MergeResult:
    active = service or build_memory_service()
    result = asyncio.run(active.merge_batch_qna(user_id, answers))
    log.info("Merged %d answers: %s", len(answers), result.report.summary())
    return result


def ask_questions(
    *,
    user_id: str,
    count: int | None = None,
    service: MemoryService | None = None,
) -> MemoryProfile:
    """Add follow-up questions about gaps in the user's memory."""

    active = service or build_memory_service()
    question_count = count if count is not None else get_memory_config().question_count
    return asyncio.run(active.propose_questions(user_id, question_count))


def import_github_projects(
    *,
    user_id: str,
    target_role: str | None = None,
    max_repositories: int | None = None,
    fetcher: ExternalRepositoryFetcher | None = None,
    service: MemoryService | None = None,
) -> MergeResult:
    active = service or build_memory_service()
    active_fetcher = fetcher or GitHubFetcher()
    result = asyncio.run(
        active.import_external_projects(
            user_id,
            active_fetcher,
            target_role=target_role,
            max_repositories=max_repositories,
        )
    )
    log.info("Finished GitHub import: %s", result.report.summary())
    return result


def optimize_skills(*, user_id: str, service: MemoryService | None = None) -> MemoryProfile:
    active = service or build_memory_service()
    return asyncio.run(active.optimize_skills(user_id))


def generate_resume(
    *,
    user_id: str,
    job_description: str | None = None,
    service: MemoryService | None = None,
) -> ResumeDocument:
    active = service or build_memory_service()
    return asyncio.run(active.generate_document(user_id, job_description))


def enhance_content(
    content: str,
    *,
    context: str = DEFAULT_ENHANCE_CONTEXT,
    service: MemoryService | None = None,
) -> ContentEnhancement:
    active = service or build_memory_service()
    return asyncio.run(active.enhance_content(content, context))


def generate_section(
    *,
    user_id: str,
    section_type: SectionType | str,
    context: str = "",
    service: MemoryService | None = None,
) -> str:
    active = service or build_memory_service()
    return asyncio.run(active.generate_section(user_id, section_type, context))


def show_profile(*, user_id: str, service: MemoryService | None = None) -> MemoryProfile:
    active = service or build_memory_service()
    return active.load_profile(user_id)
