"""SQLAlchemy adapter package for career memory storage."""

from __future__ import annotations

from .mappings import create_all_tables, memory_profile_table, metadata, resume_document_table
from .repositories import SqlAlchemyProfileRepository, SqlAlchemyResumeRepository
from .unit_of_work import (
    SqlAlchemyMemoryUnitOfWork,
    StartupError,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyMemoryUnitOfWork",
    "SqlAlchemyProfileRepository",
    "SqlAlchemyResumeRepository",
    "StartupError",
    "create_all_tables",
    "is_started",
    "memory_profile_table",
    "metadata",
    "resume_document_table",
    "shutdown",
    "startup",
]
