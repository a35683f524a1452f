"""Transaction boundary the memory service runs its reads and writes in."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, Self, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from careermem.domain.ports.persistence import ProfileRepository, ResumeRepository


@dataclass(slots=True)
class MemoryRepositories:
    profiles: ProfileRepository
    resumes: ResumeRepository


@runtime_checkable
class MemoryUnitOfWork(Protocol):
    """Context manager exposing the repositories of one transaction.

    Work is kept only after ``commit``; leaving the block with an exception
    discards it.
    """

    @property
    def repositories(self) -> MemoryRepositories: ...

    def __enter__(self) -> Self: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...
