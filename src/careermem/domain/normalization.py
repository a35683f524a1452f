"""Entity normalizers.

Each normalizer accepts a record of any shape (missing fields, wrong types,
synonym field names, unknown extras) and returns a fully typed entity. Field
resolution is table driven: every canonical attribute lists the source keys it
may arrive under, in priority order, and one generic resolver walks them.

Identifiers are preserved when present and synthesised otherwise. A record
without an id gets a fresh one on *every* call, so raw input must be
normalized once at ingestion; re-normalizing the output is a no-op.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, cast

from careermem.domain.coercion import (
    coerce_to_bool,
    coerce_to_int,
    coerce_to_plain_text,
    coerce_to_skill_set,
    coerce_to_string_list,
    coerce_to_text,
    coerce_to_timestamp,
    is_present,
    resolve_field,
)
from careermem.domain.model import (
    COMPANY_PLACEHOLDER,
    DEFAULT_QUESTION,
    ROLE_PLACEHOLDER,
    ActivityLevel,
    AnalyzedExternalProject,
    Education,
    EntityKind,
    Experience,
    LeadershipActivity,
    Project,
    QnAItem,
    WorkingStatus,
    new_id,
    utcnow,
)

if TYPE_CHECKING:
    from careermem.domain.model import IdFactory, ProfileEntity

type RawRecord = Mapping[str, object]
type Coercer = Callable[[object], object]


@dataclass(frozen=True, slots=True)
class FieldMapping:
    """Ordered candidate source keys for one canonical attribute."""

    attribute: str
    sources: tuple[str, ...]
    coerce: Coercer = coerce_to_plain_text
    default: object = ""


EXPERIENCE_FIELDS: tuple[FieldMapping, ...] = (
    FieldMapping("role", ("role", "title", "position"), default=ROLE_PLACEHOLDER),
    FieldMapping("company", ("company", "organization", "employer"), default=COMPANY_PLACEHOLDER),
    FieldMapping("start_date", ("startDate", "start_date", "start")),
    FieldMapping("end_date", ("endDate", "end_date", "end")),
    FieldMapping(
        "description",
        ("description", "summary", "responsibilities", "bullets"),
        coerce=coerce_to_text,
    ),
)

EDUCATION_FIELDS: tuple[FieldMapping, ...] = (
    FieldMapping("degree", ("degree", "qualification", "major", "title")),
    FieldMapping("school", ("school", "institution", "university", "college")),
    FieldMapping("year", ("year", "date", "dates")),
)

PROJECT_FIELDS: tuple[FieldMapping, ...] = (
    FieldMapping("name", ("name", "title")),
    FieldMapping(
        "description",
        ("description", "summary", "details", "content"),
        coerce=coerce_to_text,
    ),
    FieldMapping("link", ("link", "url", "demo")),
    FieldMapping("repo_link", ("repoLink", "repo_link", "github", "code", "repo")),
)

LEADERSHIP_FIELDS: tuple[FieldMapping, ...] = (
    FieldMapping("name", ("name", "title", "organization")),
    FieldMapping(
        "description",
        ("description", "summary", "details", "contributions"),
        coerce=coerce_to_text,
    ),
    FieldMapping("date_range", ("dateRange", "date_range", "dates", "year")),
)

EXTERNAL_PROJECT_FIELDS: tuple[FieldMapping, ...] = (
    FieldMapping("repo_name", ("repoName", "fullName", "full_name", "name")),
    FieldMapping("description", ("description",), coerce=coerce_to_text),
    FieldMapping("html_url", ("htmlUrl", "html_url", "url")),
    FieldMapping("language", ("language",)),
    FieldMapping("last_activity", ("lastActivity", "pushedAt", "pushed_at")),
    FieldMapping(
        "completeness_score",
        ("completenessScore", "completeness"),
        coerce=coerce_to_int,
        default=0,
    ),
    FieldMapping(
        "technologies",
        ("technologies", "advancedTechUsed", "techStack"),
        coerce=coerce_to_skill_set,
        default=[],
    ),
    FieldMapping("major_project", ("majorProject",), coerce=coerce_to_bool, default=False),
    FieldMapping(
        "domain_tags",
        ("domainTags", "domainSpecific", "domains"),
        coerce=coerce_to_skill_set,
        default=[],
    ),
    FieldMapping("summary", ("summary", "aiSummary"), coerce=coerce_to_text),
    FieldMapping(
        "suggested_bullets",
        ("suggestedBullets", "suggestedBulletPoints", "bullets"),
        coerce=coerce_to_string_list,
        default=[],
    ),
)

# a bare string in an entity list is taken as this attribute
_PRIMARY_TEXT_KEY: dict[EntityKind, str] = {
    EntityKind.EXPERIENCE: "description",
    EntityKind.EDUCATION: "degree",
    EntityKind.PROJECT: "name",
    EntityKind.LEADERSHIP: "name",
    EntityKind.EXTERNAL_PROJECT: "repoName",
}


def normalize_experience(raw: object, *, id_factory: IdFactory = new_id) -> Experience:
    record = _as_record(raw, EntityKind.EXPERIENCE)
    return Experience(
        id=_resolve_id(record, id_factory), **_resolve_fields(record, EXPERIENCE_FIELDS)
    )


def normalize_education(raw: object, *, id_factory: IdFactory = new_id) -> Education:
    record = _as_record(raw, EntityKind.EDUCATION)
    return Education(
        id=_resolve_id(record, id_factory), **_resolve_fields(record, EDUCATION_FIELDS)
    )


def normalize_project(raw: object, *, id_factory: IdFactory = new_id) -> Project:
    record = _as_record(raw, EntityKind.PROJECT)
    return Project(id=_resolve_id(record, id_factory), **_resolve_fields(record, PROJECT_FIELDS))


def normalize_leadership(raw: object, *, id_factory: IdFactory = new_id) -> LeadershipActivity:
    record = _as_record(raw, EntityKind.LEADERSHIP)
    return LeadershipActivity(
        id=_resolve_id(record, id_factory), **_resolve_fields(record, LEADERSHIP_FIELDS)
    )


def normalize_external_project(
    raw: object, *, id_factory: IdFactory = new_id
) -> AnalyzedExternalProject:
    """Normalize an analyzed repository; the repository full name doubles as its id."""

    record = _as_record(raw, EntityKind.EXTERNAL_PROJECT)
    values = _resolve_fields(record, EXTERNAL_PROJECT_FIELDS)
    identifier = resolve_field(record, ("id", "fullName", "full_name", "repoName"))
    relevance = resolve_field(record, ("relevanceScore", "relevance"))
    return AnalyzedExternalProject(
        id=coerce_to_plain_text(identifier) or id_factory(),
        working_status=_working_status(record.get("workingStatus")),
        activity_level=_activity_level(record.get("activityLevel")),
        relevance_score=coerce_to_int(relevance) if relevance is not None else None,
        **values,
    )


def normalize_qna_item(raw: object, *, id_factory: IdFactory = new_id) -> QnAItem:
    record = raw if isinstance(raw, Mapping) else {"question": raw}
    record = cast("RawRecord", record)
    question = record.get("question")
    if not isinstance(question, str) or not question.strip():
        question = DEFAULT_QUESTION
    return QnAItem(
        id=_resolve_id(record, id_factory),
        question=question.strip(),
        options=coerce_to_string_list(record.get("options")),
        date_added=coerce_to_timestamp(record.get("dateAdded")) or utcnow(),
    )


_NORMALIZERS: dict[EntityKind, Callable[..., ProfileEntity]] = {
    EntityKind.EXPERIENCE: normalize_experience,
    EntityKind.EDUCATION: normalize_education,
    EntityKind.PROJECT: normalize_project,
    EntityKind.LEADERSHIP: normalize_leadership,
    EntityKind.EXTERNAL_PROJECT: normalize_external_project,
}


def normalize_entity(
    kind: EntityKind, raw: object, *, id_factory: IdFactory = new_id
) -> ProfileEntity:
    """Dispatch ``raw`` to the normalizer for ``kind``."""

    return _NORMALIZERS[kind](raw, id_factory=id_factory)


def _as_record(raw: object, kind: EntityKind) -> RawRecord:
    if isinstance(raw, Mapping):
        return cast("RawRecord", raw)
    if isinstance(raw, str) and raw.strip():
        return {_PRIMARY_TEXT_KEY[kind]: raw}
    return {}


def _resolve_id(record: RawRecord, id_factory: IdFactory) -> str:
    identifier = coerce_to_plain_text(record.get("id"))
    return identifier or id_factory()


def _resolve_fields(record: RawRecord, mappings: tuple[FieldMapping, ...]) -> dict[str, object]:
    values: dict[str, object] = {}
    for mapping in mappings:
        raw_value = resolve_field(record, mapping.sources)
        value = mapping.coerce(raw_value) if raw_value is not None else None
        if not is_present(value):
            value = _copy_default(mapping.default)
        values[mapping.attribute] = value
    return values


def _copy_default(default: object) -> object:
    return list(cast("list[object]", default)) if isinstance(default, list) else default


def _enum_token(value: object) -> str:
    if not isinstance(value, str):
        return ""
    return " ".join(value.strip().lower().replace("_", " ").replace("-", " ").split())


def _working_status(value: object) -> WorkingStatus:
    token = _enum_token(value)
    if token in {"notworking", "broken"}:
        return WorkingStatus.NOT_WORKING
    try:
        return WorkingStatus(token)
    except ValueError:
        return WorkingStatus.UNKNOWN


def _activity_level(value: object) -> ActivityLevel:
    try:
        return ActivityLevel(_enum_token(value))
    except ValueError:
        return ActivityLevel.LOW
