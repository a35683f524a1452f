"""Ports for pulling raw material from outside the system."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from careermem.domain.model import ExternalRepository


@dataclass(slots=True)
class ExternalRepositoryFetchResult:
    """Repositories listed from a code host plus the READMEs that could be read."""

    repositories: list[ExternalRepository] = field(default_factory=list["ExternalRepository"])
    readmes: dict[str, str] = field(default_factory=dict[str, str])


@runtime_checkable
class ExternalRepositoryFetcher(Protocol):
    """Async callable port for listing a user's repositories together with their READMEs."""

    async def __call__(
        self, *, max_repositories: int | None = None
    ) -> ExternalRepositoryFetchResult: ...


@runtime_checkable
class DocumentTextExtractor(Protocol):
    """Turn an uploaded file into plain text."""

    def __call__(self, name: str, raw: bytes) -> str: ...


__all__ = ["DocumentTextExtractor", "ExternalRepositoryFetchResult", "ExternalRepositoryFetcher"]
