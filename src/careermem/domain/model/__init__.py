"""Domain model for career memory profiles."""

from __future__ import annotations

from .base import (
    Entity,
    IdFactory,
    Payload,
    from_epoch_ms,
    new_id,
    to_epoch_ms,
    truncate_to_ms,
    utcnow,
)
from .entities import (
    COMPANY_PLACEHOLDER,
    ROLE_PLACEHOLDER,
    AnalyzedExternalProject,
    Education,
    Experience,
    LeadershipActivity,
    ProfileEntity,
    Project,
)
from .enums import ActivityLevel, EntityKind, SectionType, WorkingStatus
from .profile import (
    DEFAULT_QUESTION,
    DEFAULT_RESUME_TITLE,
    PROFILE_LIST_ATTRIBUTES,
    ContentEnhancement,
    ExternalRepository,
    GroundingCitation,
    MemoryProfile,
    PersonalInfo,
    QnAAnswer,
    QnAItem,
    ResearchContext,
    ResumeDocument,
)

__all__ = [
    "COMPANY_PLACEHOLDER",
    "DEFAULT_QUESTION",
    "DEFAULT_RESUME_TITLE",
    "PROFILE_LIST_ATTRIBUTES",
    "ROLE_PLACEHOLDER",
    "ActivityLevel",
    "AnalyzedExternalProject",
    "ContentEnhancement",
    "Education",
    "Entity",
    "EntityKind",
    "Experience",
    "ExternalRepository",
    "GroundingCitation",
    "IdFactory",
    "LeadershipActivity",
    "MemoryProfile",
    "Payload",
    "PersonalInfo",
    "ProfileEntity",
    "Project",
    "QnAAnswer",
    "QnAItem",
    "ResearchContext",
    "ResumeDocument",
    "SectionType",
    "WorkingStatus",
    "from_epoch_ms",
    "new_id",
    "to_epoch_ms",
    "truncate_to_ms",
    "utcnow",
]
