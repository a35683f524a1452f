"""Aggregates: the canonical memory profile and derived resume documents."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING

from .base import new_id, to_epoch_ms, utcnow
from .entities import (
    AnalyzedExternalProject,
    Education,
    Experience,
    LeadershipActivity,
    Project,
)
from .enums import EntityKind

if TYPE_CHECKING:
    from datetime import datetime

    from .base import Payload
    from .entities import ProfileEntity

DEFAULT_QUESTION = "Details needed."
DEFAULT_RESUME_TITLE = "Professional Resume"


@dataclass(kw_only=True)
class PersonalInfo:
    full_name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    linkedin: str = ""
    website: str = ""
    summary: str = ""

    def as_payload(self) -> Payload:
        return {
            "fullName": self.full_name,
            "email": self.email,
            "phone": self.phone,
            "location": self.location,
            "linkedin": self.linkedin,
            "website": self.website,
            "summary": self.summary,
        }

    def field_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in fields(self))


@dataclass(kw_only=True)
class QnAItem:
    id: str = field(default_factory=new_id)
    question: str = DEFAULT_QUESTION
    options: list[str] = field(default_factory=list[str])
    date_added: datetime = field(default_factory=utcnow)

    def as_payload(self) -> Payload:
        return {
            "id": self.id,
            "question": self.question,
            "options": list(self.options),
            "dateAdded": to_epoch_ms(self.date_added),
        }


@dataclass(frozen=True, kw_only=True)
class QnAAnswer:
    """A user's answer to one of the profile's open questions."""

    question: str
    answer: str
    question_id: str | None = None


@dataclass(frozen=True, kw_only=True)
class GroundingCitation:
    uri: str
    title: str = ""

    def as_payload(self) -> Payload:
        return {"uri": self.uri, "title": self.title}


@dataclass(kw_only=True)
class ResearchContext:
    summary: str = ""
    sources: list[GroundingCitation] = field(default_factory=list[GroundingCitation])

    def as_payload(self) -> Payload:
        return {"summary": self.summary, "sources": [s.as_payload() for s in self.sources]}


@dataclass(frozen=True, kw_only=True)
class ContentEnhancement:
    """A rewritten resume passage with the oracle's impact rating (0 when nothing changed)."""

    refined_text: str
    impact_score: float = 0
    changes: str = ""

    def as_payload(self) -> Payload:
        return {
            "refinedText": self.refined_text,
            "impactScore": self.impact_score,
            "changes": self.changes,
        }


@dataclass(kw_only=True)
class ExternalRepository:
    """Raw repository record as fetched from a code host, before enrichment."""

    full_name: str
    name: str = ""
    owner: str = ""
    description: str = ""
    html_url: str = ""
    homepage: str = ""
    language: str = ""
    stars: int = 0
    forks: int = 0
    pushed_at: str = ""
    topics: list[str] = field(default_factory=list[str])
    has_issues: bool = False
    archived: bool = False
    fork: bool = False
    private: bool = False

    def as_payload(self) -> Payload:
        return {
            "fullName": self.full_name,
            "name": self.name,
            "owner": self.owner,
            "description": self.description,
            "htmlUrl": self.html_url,
            "homepage": self.homepage,
            "language": self.language,
            "stars": self.stars,
            "forks": self.forks,
            "pushedAt": self.pushed_at,
            "topics": list(self.topics),
            "hasIssues": self.has_issues,
            "archived": self.archived,
        }


@dataclass(kw_only=True)
class MemoryProfile:
    """The canonical aggregate of everything known about one user's career."""

    last_updated: datetime = field(default_factory=utcnow)
    personal_info: PersonalInfo = field(default_factory=PersonalInfo)
    experiences: list[Experience] = field(default_factory=list[Experience])
    educations: list[Education] = field(default_factory=list[Education])
    projects: list[Project] = field(default_factory=list[Project])
    leadership_activities: list[LeadershipActivity] = field(
        default_factory=list[LeadershipActivity]
    )
    skills: list[str] = field(default_factory=list[str])
    raw_source_files: list[str] = field(default_factory=list[str])
    qna: list[QnAItem] = field(default_factory=list[QnAItem])
    external_projects: list[AnalyzedExternalProject] = field(
        default_factory=list[AnalyzedExternalProject]
    )

    def entities(self, kind: EntityKind) -> list[ProfileEntity]:
        return list(getattr(self, PROFILE_LIST_ATTRIBUTES[kind]))

    def entity_count(self) -> int:
        return sum(len(self.entities(kind)) for kind in EntityKind)

    def as_payload(self) -> Payload:
        return {
            "lastUpdated": to_epoch_ms(self.last_updated),
            "personalInfo": self.personal_info.as_payload(),
            "experiences": [e.as_payload() for e in self.experiences],
            "educations": [e.as_payload() for e in self.educations],
            "projects": [p.as_payload() for p in self.projects],
            "leadershipActivities": [a.as_payload() for a in self.leadership_activities],
            "skills": list(self.skills),
            "rawSourceFiles": list(self.raw_source_files),
            "qna": [q.as_payload() for q in self.qna],
            "externalProjects": [p.as_payload() for p in self.external_projects],
        }


PROFILE_LIST_ATTRIBUTES: dict[EntityKind, str] = {
    EntityKind.EXPERIENCE: "experiences",
    EntityKind.EDUCATION: "educations",
    EntityKind.PROJECT: "projects",
    EntityKind.LEADERSHIP: "leadership_activities",
    EntityKind.EXTERNAL_PROJECT: "external_projects",
}


@dataclass(kw_only=True)
class ResumeDocument:
    """A user-editable projection of a profile for one output artifact."""

    id: str = field(default_factory=new_id)
    title: str = DEFAULT_RESUME_TITLE
    last_modified: datetime = field(default_factory=utcnow)
    ats_score: float = 0
    personal_info: PersonalInfo = field(default_factory=PersonalInfo)
    experience: list[Experience] = field(default_factory=list[Experience])
    education: list[Education] = field(default_factory=list[Education])
    projects: list[Project] = field(default_factory=list[Project])
    leadership_activities: list[LeadershipActivity] = field(
        default_factory=list[LeadershipActivity]
    )
    skills: list[str] = field(default_factory=list[str])
    research_context: ResearchContext | None = None
    hidden_keywords: list[str] = field(default_factory=list[str])

    def as_payload(self) -> Payload:
        payload: Payload = {
            "id": self.id,
            "title": self.title,
            "lastModified": to_epoch_ms(self.last_modified),
            "atsScore": self.ats_score,
            "personalInfo": self.personal_info.as_payload(),
            "experience": [e.as_payload() for e in self.experience],
            "education": [e.as_payload() for e in self.education],
            "projects": [p.as_payload() for p in self.projects],
            "leadershipActivities": [a.as_payload() for a in self.leadership_activities],
            "skills": list(self.skills),
            "hiddenKeywords": list(self.hidden_keywords),
        }
        if self.research_context is not None:
            payload["researchContext"] = self.research_context.as_payload()
        return payload
