"""Result types shared by the deterministic merge and the oracle-assisted engine."""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from careermem.domain.model import EntityKind

if TYPE_CHECKING:
    from careermem.domain.model import MemoryProfile


type IdentityKey = tuple[Hashable, ...]


@dataclass(slots=True)
class KindCounts:
    """How the entities of one kind fared in a merge."""

    created: int = 0
    updated: int = 0
    retained: int = 0


@dataclass(slots=True)
class MergeReport:
    """Per-kind accounting of a merge plus the skills it added."""

    counts: dict[EntityKind, KindCounts] = field(
        default_factory=lambda: {kind: KindCounts() for kind in EntityKind}
    )
    skills_added: int = 0

    def for_kind(self, kind: EntityKind) -> KindCounts:
        return self.counts[kind]

    @property
    def created(self) -> int:
        return sum(c.created for c in self.counts.values())

    @property
    def updated(self) -> int:
        return sum(c.updated for c in self.counts.values())

    @property
    def retained(self) -> int:
        return sum(c.retained for c in self.counts.values())

    def summary(self) -> str:
        return (
            f"created={self.created} updated={self.updated} retained={self.retained} "
            f"skills_added={self.skills_added}"
        )


@dataclass(slots=True)
class MergeResult:
    """A merged profile together with the report that produced it."""

    profile: MemoryProfile
    report: MergeReport
