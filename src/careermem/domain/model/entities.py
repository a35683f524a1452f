"""Canonical career-fact entities held in a memory profile."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

from .base import Entity, Payload
from .enums import ActivityLevel, EntityKind, WorkingStatus

ROLE_PLACEHOLDER = "Role"
COMPANY_PLACEHOLDER = "Company"


@dataclass(kw_only=True)
class Experience(Entity):
    KIND: ClassVar[EntityKind] = EntityKind.EXPERIENCE

    role: str = ROLE_PLACEHOLDER
    company: str = COMPANY_PLACEHOLDER
    start_date: str = ""
    end_date: str = ""
    description: str = ""

    def as_payload(self) -> Payload:
        return {
            "id": self.id,
            "role": self.role,
            "company": self.company,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "description": self.description,
        }


@dataclass(kw_only=True)
class Education(Entity):
    KIND: ClassVar[EntityKind] = EntityKind.EDUCATION

    degree: str = ""
    school: str = ""
    year: str = ""

    def as_payload(self) -> Payload:
        return {"id": self.id, "degree": self.degree, "school": self.school, "year": self.year}


@dataclass(kw_only=True)
class Project(Entity):
    KIND: ClassVar[EntityKind] = EntityKind.PROJECT

    name: str = ""
    description: str = ""
    link: str = ""
    repo_link: str = ""

    def as_payload(self) -> Payload:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "link": self.link,
            "repoLink": self.repo_link,
        }


@dataclass(kw_only=True)
class LeadershipActivity(Entity):
    KIND: ClassVar[EntityKind] = EntityKind.LEADERSHIP

    name: str = ""
    description: str = ""
    date_range: str = ""

    def as_payload(self) -> Payload:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "dateRange": self.date_range,
        }


@dataclass(kw_only=True)
class AnalyzedExternalProject(Entity):
    """An external repository enriched with oracle-derived resume metadata.

    The id is the repository's full name, so re-imports update in place.
    """

    KIND: ClassVar[EntityKind] = EntityKind.EXTERNAL_PROJECT

    repo_name: str = ""
    description: str = ""
    html_url: str = ""
    language: str = ""
    last_activity: str = ""
    completeness_score: int = 0
    working_status: WorkingStatus = WorkingStatus.UNKNOWN
    activity_level: ActivityLevel = ActivityLevel.LOW
    technologies: list[str] = field(default_factory=list[str])
    major_project: bool = False
    domain_tags: list[str] = field(default_factory=list[str])
    summary: str = ""
    suggested_bullets: list[str] = field(default_factory=list[str])
    relevance_score: int | None = None

    def as_payload(self) -> Payload:
        payload: Payload = {
            "id": self.id,
            "repoName": self.repo_name,
            "description": self.description,
            "htmlUrl": self.html_url,
            "language": self.language,
            "lastActivity": self.last_activity,
            "completenessScore": self.completeness_score,
            "workingStatus": str(self.working_status),
            "activityLevel": str(self.activity_level),
            "technologies": list(self.technologies),
            "majorProject": self.major_project,
            "domainTags": list(self.domain_tags),
            "summary": self.summary,
            "suggestedBullets": list(self.suggested_bullets),
        }
        if self.relevance_score is not None:
            payload["relevanceScore"] = self.relevance_score
        return payload


type ProfileEntity = Experience | Education | Project | LeadershipActivity | AnalyzedExternalProject
