"""Application service for a user's career memory.

Every mutating operation runs as one load → reconcile → save cycle while
holding the user's profile lock, and the save is compare-and-swap inside a
single unit of work. A failed or cancelled operation therefore persists
nothing and leaves the stored profile as it was.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from careermem.domain.errors import UnsupportedDocumentError
from careermem.domain.model import MemoryProfile
from careermem.domain.reconciliation import DEFAULT_ENHANCE_CONTEXT, MergeResult

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping, Sequence

    from careermem.domain.model import ContentEnhancement, QnAAnswer, ResumeDocument, SectionType
    from careermem.domain.ports import (
        DocumentTextExtractor,
        ExternalRepositoryFetcher,
        MemoryUnitOfWork,
    )
    from careermem.domain.reconciliation import ReconciliationEngine

log = getLogger(__name__)

type EngineFactory = Callable[[], ReconciliationEngine]
type UnitOfWorkFactory = Callable[[], MemoryUnitOfWork]


class ProfileLocks:
    """One :class:`asyncio.Lock` per user id, created on first use."""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}

    def lock_for(self, user_id: str) -> asyncio.Lock:
        lock = self._locks.get(user_id)
        if lock is None:
            lock = self._locks[user_id] = asyncio.Lock()
        return lock

    def __len__(self) -> int:
        return len(self._locks)


@dataclass(slots=True)
class FileIngestResult:
    """Outcome of ingesting a batch of uploaded files."""

    merge: MergeResult
    merged_files: list[str]
    skipped_files: list[str] = field(default_factory=list[str])


@dataclass(slots=True, kw_only=True)
class MemoryService:
    """Persisted variants of the reconciliation operations.

    ``engine_factory`` is called before anything is loaded, so a missing oracle
    credential surfaces as a configuration error without touching storage.
    """

    engine_factory: EngineFactory
    unit_of_work_factory: UnitOfWorkFactory
    extract_text: DocumentTextExtractor | None = None
    locks: ProfileLocks = field(default_factory=ProfileLocks)

    def load_profile(self, user_id: str) -> MemoryProfile:
        """Return the stored profile, or a fresh empty one if the user has none."""

        with self.unit_of_work_factory() as uow:
            return uow.repositories.profiles.get(user_id) or MemoryProfile()

    def list_documents(self, user_id: str) -> list[ResumeDocument]:
        with self.unit_of_work_factory() as uow:
            return uow.repositories.resumes.list_for_user(user_id)

    def save_document(self, user_id: str, document: ResumeDocument) -> None:
        with self.unit_of_work_factory() as uow:
            uow.repositories.resumes.save(user_id, document)
            uow.commit()

    def delete_document(self, user_id: str, document_id: str) -> bool:
        with self.unit_of_work_factory() as uow:
            deleted = uow.repositories.resumes.delete(user_id, document_id)
            uow.commit()
        return deleted

    async def merge_free_text(self, user_id: str, text: str) -> MergeResult:
        engine = self.engine_factory()
        return await self._update(user_id, lambda profile: engine.merge_free_text(profile, text))

    async def merge_batch_qna(self, user_id: str, answers: Sequence[QnAAnswer]) -> MergeResult:
        engine = self.engine_factory()
        return await self._update(
            user_id, lambda profile: engine.merge_batch_qna(profile, answers)
        )

    async def merge_structured_files(
        self, user_id: str, texts: Sequence[str], filenames: Sequence[str]
    ) -> MergeResult:
        engine = self.engine_factory()
        return await self._update(
            user_id,
            lambda profile: engine.merge_structured_files(profile, texts, filenames),
        )

    async def ingest_files(self, user_id: str, files: Mapping[str, bytes]) -> FileIngestResult:
        """Extract text from every file independently, then merge them all at once.

        Unsupported file types are skipped and reported; they do not abort the batch.
        """

        engine = self.engine_factory()
        if self.extract_text is None:
            raise RuntimeError("MemoryService was built without a document text extractor")
        texts: list[str] = []
        merged: list[str] = []
        skipped: list[str] = []
        for name, raw in files.items():
            try:
                text = self.extract_text(name, raw)
            except UnsupportedDocumentError as exc:
                log.warning("Skipping %s: %s", name, exc)
                skipped.append(name)
                continue
            if not text.strip():
                log.warning("Skipping %s: no readable text", name)
                skipped.append(name)
                continue
            texts.append(text)
            merged.append(name)
        result = await self._update(
            user_id,
            lambda profile: engine.merge_structured_files(profile, texts, merged),
        )
        return FileIngestResult(merge=result, merged_files=merged, skipped_files=skipped)

    async def import_external_projects(
        self,
        user_id: str,
        fetcher: ExternalRepositoryFetcher,
        *,
        target_role: str | None = None,
        max_repositories: int | None = None,
    ) -> MergeResult:
        engine = self.engine_factory()
        fetched = await fetcher(max_repositories=max_repositories)
        log.info("Fetched %d repositories", len(fetched.repositories))
        return await self._update(
            user_id,
            lambda profile: engine.import_external_projects(
                profile, fetched.repositories, fetched.readmes, target_role=target_role
            ),
        )

    async def propose_questions(self, user_id: str, count: int = 3) -> MemoryProfile:
        engine = self.engine_factory()
        return await self._update(user_id, lambda profile: engine.propose_questions(profile, count))

    async def optimize_skills(self, user_id: str) -> MemoryProfile:
        engine = self.engine_factory()
        return await self._update(user_id, engine.optimize_skills)

    async def generate_document(
        self, user_id: str, job_description: str | None = None
    ) -> ResumeDocument:
        """Generate a resume from the stored profile and save it with the user's documents."""

        engine = self.engine_factory()
        document = await engine.generate_document(self.load_profile(user_id), job_description)
        self.save_document(user_id, document)
        log.info("Generated resume %s for user %s", document.id, user_id)
        return document

    async def tailor_document(
        self, user_id: str, document_id: str, job_description: str
    ) -> ResumeDocument:
        engine = self.engine_factory()
        with self.unit_of_work_factory() as uow:
            document = uow.repositories.resumes.get(user_id, document_id)
        if document is None:
            raise LookupError(f"No resume {document_id!r} for user {user_id!r}")
        tailored = await engine.tailor_document(document, job_description)
        if tailored is not document:
            self.save_document(user_id, tailored)
        return tailored

    async def enhance_content(
        self, content: str, context: str = DEFAULT_ENHANCE_CONTEXT
    ) -> ContentEnhancement:
        engine = self.engine_factory()
        return await engine.enhance_content(content, context)

    async def generate_section(
        self, user_id: str, section_type: SectionType | str, context: str = ""
    ) -> str:
        """Write one resume section from the stored profile; nothing is saved."""

        engine = self.engine_factory()
        return await engine.generate_section(self.load_profile(user_id), section_type, context)

    async def import_resume_text(self, user_id: str, text: str) -> ResumeDocument:
        """Parse an existing resume into a new document (the profile is not touched)."""

        engine = self.engine_factory()
        document = await engine.extract_document(text)
        self.save_document(user_id, document)
        return document

    async def _update[T: (MergeResult, MemoryProfile)](
        self,
        user_id: str,
        step: Callable[[MemoryProfile], Awaitable[T]],
    ) -> T:
        async with self.locks.lock_for(user_id):
            with self.unit_of_work_factory() as uow:
                stored = uow.repositories.profiles.get(user_id)
            current = stored or MemoryProfile()
            outcome = await step(current)
            updated = outcome.profile if isinstance(outcome, MergeResult) else outcome
            if updated is current:
                return outcome
            with self.unit_of_work_factory() as uow:
                uow.repositories.profiles.save(
                    user_id,
                    updated,
                    expected_last_updated=stored.last_updated if stored else None,
                )
                uow.commit()
            log.info("Saved memory profile for user %s", user_id)
            return outcome
