"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class EntityKind(StrEnum):
    """Discriminator for the entity lists held by a memory profile."""

    EXPERIENCE = "experience"
    EDUCATION = "education"
    PROJECT = "project"
    LEADERSHIP = "leadership"
    EXTERNAL_PROJECT = "external_project"


class WorkingStatus(StrEnum):
    UNKNOWN = "unknown"
    WORKING = "working"
    NOT_WORKING = "not working"


class ActivityLevel(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class SectionType(StrEnum):
    """Resume sections that can be written straight from the memory profile."""

    SUMMARY = "summary"
    EXPERIENCE = "experience"
    PROJECT = "project"
    LEADERSHIP = "leadershipActivity"
