"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import (
    DocumentTextExtractor,
    ExternalRepositoryFetcher,
    ExternalRepositoryFetchResult,
)
from .persistence import ProfileRepository, ResumeRepository
from .unit_of_work import MemoryRepositories, MemoryUnitOfWork

__all__ = [
    "DocumentTextExtractor",
    "ExternalRepositoryFetchResult",
    "ExternalRepositoryFetcher",
    "MemoryRepositories",
    "MemoryUnitOfWork",
    "ProfileRepository",
    "ResumeRepository",
]
