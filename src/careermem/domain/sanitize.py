"""Profile and resume-document sanitizers.

Both sanitizers accept anything (oracle output, persisted payloads, already
built aggregates) and return a structurally valid aggregate. Lists that may
arrive under several top-level keys are concatenated in key order before each
element is normalized; internships always end up among the experiences.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from logging import getLogger
from typing import TYPE_CHECKING, cast

from careermem.domain.coercion import (
    coerce_to_list,
    coerce_to_plain_text,
    coerce_to_skill_set,
    coerce_to_string_list,
    coerce_to_text,
    coerce_to_timestamp,
    resolve_field,
)
from careermem.domain.model import (
    DEFAULT_RESUME_TITLE,
    EntityKind,
    GroundingCitation,
    MemoryProfile,
    PersonalInfo,
    ResearchContext,
    ResumeDocument,
    new_id,
    truncate_to_ms,
    utcnow,
)
from careermem.domain.normalization import (
    normalize_education,
    normalize_experience,
    normalize_external_project,
    normalize_leadership,
    normalize_project,
    normalize_qna_item,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from datetime import datetime

    from careermem.domain.model import IdFactory

log = getLogger(__name__)

type RawRecord = Mapping[str, object]

PROFILE_LIST_KEYS: dict[EntityKind, tuple[str, ...]] = {
    EntityKind.EXPERIENCE: (
        "experiences",
        "experience",
        "work_experience",
        "workExperience",
        "internships",
    ),
    EntityKind.EDUCATION: ("educations", "education"),
    EntityKind.PROJECT: ("projects",),
    EntityKind.LEADERSHIP: ("leadershipActivities", "activities", "leadership"),
    EntityKind.EXTERNAL_PROJECT: ("externalProjects", "githubProjects"),
}

# resume documents use singular list names as their primary keys
DOCUMENT_LIST_KEYS: dict[EntityKind, tuple[str, ...]] = {
    EntityKind.EXPERIENCE: (
        "experience",
        "experiences",
        "work_experience",
        "workExperience",
        "internships",
    ),
    EntityKind.EDUCATION: ("education", "educations"),
    EntityKind.PROJECT: ("projects",),
    EntityKind.LEADERSHIP: ("leadershipActivities", "activities", "leadership"),
}

PERSONAL_INFO_FIELDS: dict[str, tuple[str, ...]] = {
    "full_name": ("fullName", "full_name", "name"),
    "email": ("email",),
    "phone": ("phone",),
    "location": ("location", "address"),
    "linkedin": ("linkedin", "linkedIn", "linkedinUrl"),
    "website": ("website", "portfolio", "url"),
}


def sanitize_profile(
    raw: object,
    *,
    id_factory: IdFactory = new_id,
    now: datetime | None = None,
) -> MemoryProfile:
    """Build a canonical :class:`MemoryProfile` from arbitrary input.

    ``now`` is only consulted when the input carries no usable ``lastUpdated``.
    """

    record = _as_record(raw)

    def collect[T](kind: EntityKind, normalize: Callable[..., T]) -> list[T]:
        return [
            normalize(item, id_factory=id_factory)
            for item in _concatenated(record, PROFILE_LIST_KEYS[kind])
        ]

    return MemoryProfile(
        last_updated=coerce_to_timestamp(record.get("lastUpdated")) or _stamp(now),
        personal_info=sanitize_personal_info(record),
        experiences=collect(EntityKind.EXPERIENCE, normalize_experience),
        educations=collect(EntityKind.EDUCATION, normalize_education),
        projects=collect(EntityKind.PROJECT, normalize_project),
        leadership_activities=collect(EntityKind.LEADERSHIP, normalize_leadership),
        skills=coerce_to_skill_set(record.get("skills")),
        raw_source_files=list(dict.fromkeys(coerce_to_string_list(record.get("rawSourceFiles")))),
        qna=[
            normalize_qna_item(item, id_factory=id_factory)
            for item in coerce_to_list(record.get("qna"))
            if isinstance(item, (Mapping, str))
        ],
        external_projects=collect(EntityKind.EXTERNAL_PROJECT, normalize_external_project),
    )


def sanitize_document(
    raw: object,
    *,
    id_factory: IdFactory = new_id,
    now: datetime | None = None,
) -> ResumeDocument:
    """Build a :class:`ResumeDocument` from arbitrary input."""

    record = _as_record(raw)

    def collect[T](kind: EntityKind, normalize: Callable[..., T]) -> list[T]:
        return [
            normalize(item, id_factory=id_factory)
            for item in _concatenated(record, DOCUMENT_LIST_KEYS[kind])
        ]

    title = coerce_to_plain_text(record.get("title")) or DEFAULT_RESUME_TITLE
    return ResumeDocument(
        id=coerce_to_plain_text(record.get("id")) or id_factory(),
        title=title,
        last_modified=coerce_to_timestamp(record.get("lastModified")) or _stamp(now),
        ats_score=_ats_score(record.get("atsScore")),
        personal_info=sanitize_personal_info(record),
        experience=collect(EntityKind.EXPERIENCE, normalize_experience),
        education=collect(EntityKind.EDUCATION, normalize_education),
        projects=collect(EntityKind.PROJECT, normalize_project),
        leadership_activities=collect(EntityKind.LEADERSHIP, normalize_leadership),
        skills=coerce_to_skill_set(record.get("skills")),
        research_context=sanitize_research_context(record.get("researchContext")),
        hidden_keywords=coerce_to_string_list(record.get("hiddenKeywords")),
    )


def sanitize_personal_info(record: RawRecord) -> PersonalInfo:
    """Resolve contact fields from ``record["personalInfo"]``.

    The summary falls back to a top-level ``summary`` key, which is where oracle
    output tends to put it.
    """

    source = record.get("personalInfo")
    info = cast("RawRecord", source) if isinstance(source, Mapping) else {}
    values = {
        attribute: coerce_to_plain_text(resolve_field(info, keys))
        for attribute, keys in PERSONAL_INFO_FIELDS.items()
    }
    summary = resolve_field(info, ("summary",))
    if summary is None:
        summary = record.get("summary")
    return PersonalInfo(summary=coerce_to_text(summary), **values)


def sanitize_research_context(raw: object) -> ResearchContext | None:
    if isinstance(raw, ResearchContext):
        return raw
    if not isinstance(raw, Mapping):
        return None
    record = cast("RawRecord", raw)
    sources = [
        citation
        for citation in (sanitize_citation(item) for item in coerce_to_list(record.get("sources")))
        if citation is not None
    ]
    return ResearchContext(summary=coerce_to_text(record.get("summary")), sources=sources)


def sanitize_citation(raw: object) -> GroundingCitation | None:
    """A citation needs a uri; the title falls back to the uri itself."""

    if not isinstance(raw, Mapping):
        return None
    record = cast("RawRecord", raw)
    web = record.get("web")
    if isinstance(web, Mapping):
        record = cast("RawRecord", web)
    uri = coerce_to_plain_text(record.get("uri"))
    if not uri:
        return None
    return GroundingCitation(uri=uri, title=coerce_to_plain_text(record.get("title")) or uri)


def _as_record(raw: object) -> RawRecord:
    if isinstance(raw, (MemoryProfile, ResumeDocument)):
        return raw.as_payload()
    if isinstance(raw, Mapping):
        return cast("RawRecord", raw)
    if raw is not None:
        log.warning("Discarding non-object input of type %s", type(raw).__name__)
    return {}


def _concatenated(record: RawRecord, keys: Sequence[str]) -> list[object]:
    items: list[object] = []
    for key in keys:
        items.extend(
            item for item in coerce_to_list(record.get(key)) if isinstance(item, (Mapping, str))
        )
    return items


def _ats_score(value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    # NaN and infinities have no JSON encoding
    return value if math.isfinite(value) else 0


def _stamp(now: datetime | None) -> datetime:
    return truncate_to_ms(now) if now is not None else utcnow()
