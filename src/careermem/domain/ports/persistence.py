"""Ports for persisting memory profiles and resume documents."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from datetime import datetime

    from careermem.domain.model import MemoryProfile, ResumeDocument


@runtime_checkable
class ProfileRepository(Protocol):
    """Key-value store of canonical memory profiles, one per user."""

    def get(self, user_id: str) -> MemoryProfile | None: ...

    def save(
        self,
        user_id: str,
        profile: MemoryProfile,
        *,
        expected_last_updated: datetime | None,
    ) -> None:
        """Persist ``profile`` with a compare-and-swap guard.

        ``expected_last_updated`` is the ``lastUpdated`` of the profile the caller
        loaded, or ``None`` if none was stored. If the store disagrees,
        ``ConcurrentUpdateError`` is raised and nothing is written.
        """
        ...


@runtime_checkable
class ResumeRepository(Protocol):
    """Store of user-editable resume documents."""

    def list_for_user(self, user_id: str) -> list[ResumeDocument]: ...

    def get(self, user_id: str, document_id: str) -> ResumeDocument | None: ...

    def save(self, user_id: str, document: ResumeDocument) -> None: ...

    def delete(self, user_id: str, document_id: str) -> bool: ...


__all__ = ["ProfileRepository", "ResumeRepository"]
