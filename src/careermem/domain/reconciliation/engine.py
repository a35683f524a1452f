"""Oracle-assisted reconciliation.

The oracle judges *semantic* overlap (is this paragraph the job we already
know about?). Structural validity is never taken from it: every response is
re-sanitized and then merged with :func:`merge_profiles`, so an oracle that
forgets an entity cannot delete it.
"""

from __future__ import annotations

import asyncio
import math
from collections.abc import Mapping
from dataclasses import KW_ONLY, dataclass, field, replace
from logging import getLogger
from typing import TYPE_CHECKING

from careermem.domain.coercion import coerce_to_list, coerce_to_skill_set, coerce_to_text
from careermem.domain.errors import (
    MalformedOracleResponseError,
    MergeFailedError,
    OracleUnavailableError,
)
from careermem.domain.model import (
    AnalyzedExternalProject,
    ContentEnhancement,
    EntityKind,
    MemoryProfile,
    ResearchContext,
    SectionType,
    new_id,
    utcnow,
)
from careermem.domain.normalization import normalize_external_project, normalize_qna_item
from careermem.domain.oracle import OracleAdapter, OracleReply
from careermem.domain.prompts import FILE_BREAK, RESUME_SCHEMA_HINT, format_qna_answers
from careermem.domain.sanitize import sanitize_document, sanitize_profile

from .merge import merge_profiles, next_timestamp

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence
    from datetime import datetime

    from careermem.domain.model import (
        ExternalRepository,
        IdFactory,
        Payload,
        QnAAnswer,
        QnAItem,
        ResumeDocument,
    )
    from careermem.domain.oracle import TextOracle

    from .contracts import MergeResult

log = getLogger(__name__)

ORACLE_MERGE_KINDS: tuple[EntityKind, ...] = (
    EntityKind.EXPERIENCE,
    EntityKind.EDUCATION,
    EntityKind.PROJECT,
    EntityKind.LEADERSHIP,
)
ANALYSIS_FAILED_SUMMARY = "AI analysis failed for this repository."
ANALYSIS_MISSING_SUMMARY = "AI summary unavailable."
DEFAULT_ENHANCE_CONTEXT = "resume section"
DEFAULT_IMPACT_SCORE = 5
DEFAULT_ENHANCEMENT_CHANGES = "Optimized."
ENHANCEMENT_FAILED_CHANGES = "The oracle returned no usable rewrite; the text is unchanged."

# caller-owned or enrichment-owned parts of the profile are not sent for merges
_MERGE_PAYLOAD_EXCLUDES = ("lastUpdated", "rawSourceFiles", "qna", "externalProjects")
_GENERATION_PAYLOAD_EXCLUDES = ("lastUpdated", "rawSourceFiles", "qna")


@dataclass(slots=True)
class ReconciliationEngine:
    """Merge new career facts into a profile with the help of an oracle.

    All operations are pure with respect to their inputs: they return new
    profiles/documents and never mutate the ones passed in.
    """

    oracle: OracleAdapter | TextOracle
    _: KW_ONLY
    merge_text_limit: int = 20_000
    extraction_text_limit: int = 12_000
    readme_limit: int = 2_000
    research_context_limit: int = 1_000
    id_factory: IdFactory = new_id
    clock: Callable[[], datetime] = utcnow
    adapter: OracleAdapter = field(init=False)

    def __post_init__(self) -> None:
        oracle = self.oracle
        self.adapter = oracle if isinstance(oracle, OracleAdapter) else OracleAdapter(oracle)

    async def merge_free_text(self, profile: MemoryProfile, text: str) -> MergeResult:
        """Merge unstructured ``text`` into ``profile`` with one oracle round-trip."""

        if not text.strip():
            raise MergeFailedError("Nothing to merge: the new text is empty.")
        return await self._reconcile(profile, text)

    async def merge_batch_qna(
        self, profile: MemoryProfile, answers: Sequence[QnAAnswer]
    ) -> MergeResult:
        """Merge all answered questions in a single oracle call.

        Answered questions are removed from the profile's open questions, matched
        by id when the answer carries one and by exact question text otherwise.
        """

        answered = [a for a in answers if a.answer.strip()]
        if not answered:
            raise MergeFailedError("Nothing to merge: every answer is empty.")
        text = format_qna_answers([(a.question, a.answer.strip()) for a in answered])
        answered_ids = {a.question_id for a in answered if a.question_id}
        answered_texts = {a.question for a in answered if not a.question_id}
        remaining = [
            item
            for item in profile.qna
            if item.id not in answered_ids and item.question not in answered_texts
        ]
        return await self._reconcile(profile, text, qna=remaining)

    async def merge_structured_files(
        self,
        profile: MemoryProfile,
        texts: Sequence[str],
        filenames: Iterable[str],
    ) -> MergeResult:
        """Merge the text of several files at once; file names are recorded on success."""

        parts = [text.strip() for text in texts if text and text.strip()]
        if not parts:
            raise MergeFailedError("None of the provided files contained readable text.")
        names = [name for name in filenames if name]
        return await self._reconcile(profile, FILE_BREAK.join(parts), raw_source_files=names)

    async def import_external_projects(
        self,
        profile: MemoryProfile,
        repositories: Sequence[ExternalRepository],
        readmes: Mapping[str, str] | None = None,
        *,
        target_role: str | None = None,
    ) -> MergeResult:
        """Analyze repositories and merge the analyses into ``externalProjects`` by id.

        Forks and private repositories are skipped. A repository whose analysis
        failed does not overwrite an earlier analysis of the same repository.
        """

        readmes = readmes or {}
        candidates = [repo for repo in repositories if not repo.fork and not repo.private]
        skipped = len(repositories) - len(candidates)
        if skipped:
            log.info("Skipping %d forked or private repositories", skipped)
        analyses = await asyncio.gather(
            *(
                self.analyze_repository(
                    repo, readmes.get(repo.full_name), target_role=target_role
                )
                for repo in candidates
            )
        )
        known = {project.id for project in profile.external_projects}
        usable = [
            analysis
            for analysis in analyses
            if analysis.summary != ANALYSIS_FAILED_SUMMARY or analysis.id not in known
        ]
        result = merge_profiles(
            profile,
            MemoryProfile(external_projects=usable),
            now=self.clock(),
            kinds=(EntityKind.EXTERNAL_PROJECT,),
        )
        log.info("Imported %d external projects: %s", len(usable), result.report.summary())
        return result

    async def analyze_repository(
        self,
        repository: ExternalRepository,
        readme: str | None = None,
        *,
        target_role: str | None = None,
    ) -> AnalyzedExternalProject:
        """Enrich one repository; any oracle failure yields a fallback analysis."""

        excerpt = readme[: self.readme_limit] if readme else None
        try:
            raw = await self.adapter.request_enrichment(
                repository, readme=excerpt, target_role=target_role
            )
        except (OracleUnavailableError, MalformedOracleResponseError) as exc:
            log.warning("Analysis of %s failed: %s", repository.full_name, exc)
            return _fallback_analysis(repository)
        if not isinstance(raw, Mapping):
            log.warning("Analysis of %s returned a non-object response", repository.full_name)
            return _fallback_analysis(repository)
        record = {
            **raw,
            "id": repository.full_name,
            "repoName": repository.full_name,
            "description": repository.description,
            "htmlUrl": repository.html_url,
            "language": repository.language,
            "lastActivity": repository.pushed_at,
        }
        analysis = normalize_external_project(record, id_factory=self.id_factory)
        if not analysis.summary:
            analysis.summary = ANALYSIS_MISSING_SUMMARY
        return analysis

    async def propose_questions(self, profile: MemoryProfile, count: int = 3) -> MemoryProfile:
        """Ask the oracle for clarifying questions and append them to ``qna``."""

        try:
            raw = await self.adapter.request_questions(self._merge_payload(profile), count)
        except MalformedOracleResponseError:
            return profile
        if isinstance(raw, Mapping):
            raw = raw.get("questions")
        items: list[QnAItem] = [
            normalize_qna_item(item, id_factory=self.id_factory)
            for item in coerce_to_list(raw)[:count]
            if isinstance(item, (Mapping, str))
        ]
        # the oracle does not choose identifiers for new questions
        for item in items:
            item.id = self.id_factory()
        if not items:
            log.warning("Oracle proposed no usable questions")
            return profile
        return replace(
            profile,
            qna=[*profile.qna, *items],
            last_updated=next_timestamp(profile.last_updated, self.clock()),
        )

    async def optimize_skills(self, profile: MemoryProfile) -> MemoryProfile:
        """Replace the skill list with the oracle's optimized one.

        The result goes through :func:`coerce_to_skill_set`, which removes exact
        duplicates only; entries differing in case survive.
        """

        try:
            raw = await self.adapter.request_skill_optimization(profile.skills)
        except MalformedOracleResponseError:
            return profile
        if isinstance(raw, Mapping):
            raw = raw.get("skills")
        skills = coerce_to_skill_set(raw)
        if not skills:
            log.warning("Oracle returned no usable skills; keeping the current list")
            return profile
        if skills == profile.skills:
            return profile
        return replace(
            profile,
            skills=skills,
            last_updated=next_timestamp(profile.last_updated, self.clock()),
        )

    async def extract_document(self, text: str) -> ResumeDocument:
        """Parse an existing resume into a document without touching any profile."""

        raw = await self.adapter.request_extraction(
            text[: self.extraction_text_limit], RESUME_SCHEMA_HINT
        )
        if not isinstance(raw, Mapping):
            raise MalformedOracleResponseError("Extracted resume is not a JSON object")
        return sanitize_document(raw, id_factory=self.id_factory, now=self.clock())

    async def generate_document(
        self, profile: MemoryProfile, job_description: str | None = None
    ) -> ResumeDocument:
        """Generate a resume from ``profile``, annotated with grounded research."""

        if job_description:
            research = await self._research("Job Research", job_description)
        else:
            role = profile.experiences[0].role if profile.experiences else "General"
            research = await self._research("Role Research", role)
        raw = await self.adapter.request_document(self._merge_payload(profile), research.text)
        if not isinstance(raw, Mapping):
            raise MalformedOracleResponseError("Generated resume is not a JSON object")
        document = sanitize_document(raw, id_factory=self.id_factory, now=self.clock())
        return replace(document, research_context=_research_context(research))

    async def tailor_document(
        self, document: ResumeDocument, job_description: str
    ) -> ResumeDocument:
        """Tailor ``document`` to a job; unusable oracle output keeps the document as is."""

        research = await self._research("Company values & role reqs", job_description)
        try:
            raw = await self.adapter.request_tailoring(
                document.as_payload(), job_description, research.text
            )
        except MalformedOracleResponseError:
            return document
        if not isinstance(raw, Mapping):
            log.warning("Tailored resume is not a JSON object; keeping document %s", document.id)
            return document
        tailored = sanitize_document(raw, id_factory=self.id_factory, now=self.clock())
        return replace(
            tailored,
            id=document.id,
            title=tailored.title if raw.get("title") else document.title,
            last_modified=next_timestamp(document.last_modified, self.clock()),
            research_context=_research_context(research),
        )

    async def enhance_content(
        self, content: str, context: str = DEFAULT_ENHANCE_CONTEXT
    ) -> ContentEnhancement:
        """Rewrite one resume passage for impact.

        Output that is not a JSON object leaves ``content`` as it was, with an
        impact score of 0. A missing score defaults to 5.
        """

        try:
            raw = await self.adapter.request_enhancement(
                content[: self.merge_text_limit], context
            )
        except MalformedOracleResponseError:
            raw = None
        if not isinstance(raw, Mapping):
            log.warning("Enhancement returned no usable object; keeping the original text")
            return ContentEnhancement(refined_text=content, changes=ENHANCEMENT_FAILED_CHANGES)
        return ContentEnhancement(
            refined_text=coerce_to_text(raw.get("refinedText")) or content,
            impact_score=_impact_score(raw.get("impactScore")),
            changes=coerce_to_text(raw.get("changes")) or DEFAULT_ENHANCEMENT_CHANGES,
        )

    async def generate_section(
        self, profile: MemoryProfile, section_type: SectionType | str, context: str = ""
    ) -> str:
        """Write one resume section from the facts in ``profile`` as ``* `` bullets."""

        section = SectionType(section_type)
        payload = _payload_without(profile, _GENERATION_PAYLOAD_EXCLUDES)
        text = await self.adapter.request_section(payload, section.value, context)
        return text.strip()

    async def _reconcile(
        self,
        profile: MemoryProfile,
        text: str,
        *,
        raw_source_files: Iterable[str] | None = None,
        qna: Sequence[QnAItem] | None = None,
    ) -> MergeResult:
        excerpt = text[: self.merge_text_limit]
        try:
            raw = await self.adapter.request_merge(self._merge_payload(profile), excerpt)
        except (OracleUnavailableError, MalformedOracleResponseError) as exc:
            raise MergeFailedError(f"Failed to merge new data into memory: {exc}") from exc
        if not isinstance(raw, Mapping):
            raise MergeFailedError(
                "Failed to merge new data into memory: the oracle did not return a profile object."
            )
        incoming = sanitize_profile(raw, id_factory=self.id_factory)
        result = merge_profiles(
            profile,
            incoming,
            now=self.clock(),
            raw_source_files=raw_source_files,
            qna=qna,
            kinds=ORACLE_MERGE_KINDS,
        )
        log.info("Merged new data into memory: %s", result.report.summary())
        return result

    async def _research(self, query: str, context: str) -> OracleReply:
        try:
            return await self.adapter.research(query, context[: self.research_context_limit])
        except OracleUnavailableError as exc:
            log.warning("Research for %r failed, continuing without it: %s", query, exc)
            return OracleReply(text="")

    @staticmethod
    def _merge_payload(profile: MemoryProfile) -> Payload:
        return _payload_without(profile, _MERGE_PAYLOAD_EXCLUDES)


def _payload_without(profile: MemoryProfile, keys: Iterable[str]) -> Payload:
    payload = profile.as_payload()
    for key in keys:
        payload.pop(key, None)
    return payload


def _impact_score(value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return DEFAULT_IMPACT_SCORE
    if not math.isfinite(value) or value <= 0:
        return DEFAULT_IMPACT_SCORE
    return value


def _fallback_analysis(repository: ExternalRepository) -> AnalyzedExternalProject:
    return AnalyzedExternalProject(
        id=repository.full_name,
        repo_name=repository.full_name,
        description=repository.description,
        html_url=repository.html_url,
        language=repository.language,
        last_activity=repository.pushed_at,
        summary=ANALYSIS_FAILED_SUMMARY,
    )


def _research_context(reply: OracleReply) -> ResearchContext:
    return ResearchContext(summary=reply.text.strip(), sources=list(reply.citations))


__all__ = [
    "ANALYSIS_FAILED_SUMMARY",
    "DEFAULT_ENHANCE_CONTEXT",
    "DEFAULT_IMPACT_SCORE",
    "ENHANCEMENT_FAILED_CHANGES",
    "ORACLE_MERGE_KINDS",
    "ReconciliationEngine",
]
