"""
Base building blocks:
identifiers, timestamps and the entity contract shared by every profile list.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, ClassVar
from uuid import uuid4

if TYPE_CHECKING:
    from collections.abc import Callable

    from .enums import EntityKind

type IdFactory = Callable[[], str]
type Payload = dict[str, object]


def new_id() -> str:
    return uuid4().hex


_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_ONE_MS = timedelta(milliseconds=1)


def truncate_to_ms(value: datetime) -> datetime:
    """UTC ``value`` cut to millisecond precision (the persisted resolution); naive is UTC."""
    moment = value.astimezone(UTC) if value.tzinfo else value.replace(tzinfo=UTC)
    return moment.replace(microsecond=moment.microsecond // 1000 * 1000)


def utcnow() -> datetime:
    return truncate_to_ms(datetime.now(UTC))


def to_epoch_ms(value: datetime) -> int:
    return (truncate_to_ms(value) - _EPOCH) // _ONE_MS


def from_epoch_ms(value: float) -> datetime:
    return _EPOCH + timedelta(milliseconds=int(value))


@dataclass(kw_only=True)
class Entity:
    """Identity exists as soon as the entity does and never changes afterwards."""

    id: str = field(default_factory=new_id)

    # class-level discriminator; subclasses must override
    KIND: ClassVar[EntityKind]

    @property
    def kind(self) -> EntityKind:
        return self.KIND

    def as_payload(self) -> Payload:
        raise NotImplementedError
