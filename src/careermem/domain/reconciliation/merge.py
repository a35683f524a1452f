"""Deterministic, strictly additive profile merge.

Only a shared id marks an incoming entity as an update of a stored one: a non-empty
incoming value wins, an empty or placeholder one keeps what is already known.
An entity with an unknown id that restates a stored entity (same identity key, no
conflicting field) only fills that entity's empty fields; everything else is
appended. Nothing in ``existing`` is ever dropped and neither input is mutated.
"""

from __future__ import annotations

from dataclasses import fields, replace
from datetime import timedelta
from logging import getLogger
from typing import TYPE_CHECKING

from careermem.domain.coercion import is_present
from careermem.domain.model import (
    COMPANY_PLACEHOLDER,
    PROFILE_LIST_ATTRIBUTES,
    ROLE_PLACEHOLDER,
    EntityKind,
    MemoryProfile,
    PersonalInfo,
    truncate_to_ms,
    utcnow,
)
from careermem.domain.sanitize import sanitize_profile

from .contracts import KindCounts, MergeReport, MergeResult
from .keys import identity_key, normalize_key_text

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from datetime import datetime

    from careermem.domain.model import ProfileEntity, QnAItem

    from .contracts import IdentityKey

log = getLogger(__name__)

_MIN_STEP = timedelta(milliseconds=1)
_PLACEHOLDER_VALUES: dict[str, str] = {"role": ROLE_PLACEHOLDER, "company": COMPANY_PLACEHOLDER}


def merge_profiles(
    existing: MemoryProfile,
    incoming: object,
    *,
    now: datetime | None = None,
    raw_source_files: Iterable[str] | None = None,
    qna: Sequence[QnAItem] | None = None,
    kinds: Iterable[EntityKind] | None = None,
) -> MergeResult:
    """Merge ``incoming`` into ``existing`` and return a new profile.

    ``incoming`` may be a sanitized :class:`MemoryProfile` or any raw payload, which
    is sanitized first. ``rawSourceFiles`` and ``qna`` belong to the caller: the
    incoming values are ignored, ``raw_source_files`` are unioned onto the existing
    names and ``qna`` (when given) replaces the open questions. ``kinds`` limits
    which entity lists take incoming entities; the others are carried over as is.
    """

    batch = incoming if isinstance(incoming, MemoryProfile) else sanitize_profile(incoming)
    report = MergeReport()
    merged_lists: dict[str, list[ProfileEntity]] = {}
    selected = set(EntityKind) if kinds is None else set(kinds)
    for kind, attribute in PROFILE_LIST_ATTRIBUTES.items():
        incoming_entities = batch.entities(kind) if kind in selected else []
        merged_lists[attribute] = _merge_entities(
            existing.entities(kind), incoming_entities, report.for_kind(kind)
        )

    skills = list(existing.skills)
    known_skills = set(skills)
    for skill in batch.skills:
        if skill not in known_skills:
            known_skills.add(skill)
            skills.append(skill)
    report.skills_added = len(skills) - len(existing.skills)

    files = list(existing.raw_source_files)
    if raw_source_files is not None:
        files = list(dict.fromkeys([*files, *raw_source_files]))

    profile = MemoryProfile(
        last_updated=next_timestamp(existing.last_updated, now),
        personal_info=_merge_personal_info(existing.personal_info, batch.personal_info),
        skills=skills,
        raw_source_files=files,
        qna=list(existing.qna if qna is None else qna),
        **merged_lists,  # type: ignore[arg-type]
    )
    log.debug("Merged profile: %s", report.summary())
    return MergeResult(profile=profile, report=report)


def next_timestamp(previous: datetime, now: datetime | None = None) -> datetime:
    """Return ``now`` (default: the current time, at millisecond precision) if it is
    later than ``previous``.

    Otherwise the result is ``previous`` plus one millisecond, so successive merges
    always carry strictly increasing timestamps.
    """

    candidate = truncate_to_ms(now) if now is not None else utcnow()
    if candidate <= previous:
        return truncate_to_ms(previous) + _MIN_STEP
    return candidate


def _merge_entities(
    existing: Sequence[ProfileEntity],
    incoming: Sequence[ProfileEntity],
    counts: KindCounts,
) -> list[ProfileEntity]:
    merged: list[ProfileEntity] = list(existing)
    by_id: dict[str, int] = {}
    for position, entity in enumerate(merged):
        by_id.setdefault(entity.id, position)
    # only entities that were already stored are reachable by key, each at most once
    by_key: dict[IdentityKey, int] = {}
    for position, entity in enumerate(existing):
        key = identity_key(entity)
        if key is not None:
            by_key.setdefault(key, position)

    touched: set[int] = set()
    for entity in incoming:
        position = by_id.get(entity.id)
        if position is not None:
            updated = _merge_fields(merged[position], entity)
        else:
            position = _find_restatement(entity, merged, by_key)
            if position is None:
                merged.append(entity)
                by_id.setdefault(entity.id, len(merged) - 1)
                touched.add(len(merged) - 1)
                counts.created += 1
                continue
            updated = _fill_gaps(merged[position], entity)
        if updated is not merged[position]:
            merged[position] = updated
            if position < len(existing) and position not in touched:
                counts.updated += 1
            touched.add(position)

    counts.retained = sum(1 for position in range(len(existing)) if position not in touched)
    return merged


def _find_restatement(
    entity: ProfileEntity,
    merged: Sequence[ProfileEntity],
    by_key: dict[IdentityKey, int],
) -> int | None:
    """Position of the stored entity that ``entity`` restates without contradicting it."""

    key = identity_key(entity)
    position = by_key.get(key) if key is not None else None
    if position is None or _conflicts(merged[position], entity):
        return None
    del by_key[key]
    return position


def _conflicts(current: ProfileEntity, incoming: ProfileEntity) -> bool:
    for attribute in fields(current):
        if attribute.name == "id":
            continue
        ours = getattr(current, attribute.name)
        theirs = getattr(incoming, attribute.name)
        if not (_is_informative(attribute.name, ours) and _is_informative(attribute.name, theirs)):
            continue
        if not _same_value(ours, theirs):
            return True
    return False


def _same_value(ours: object, theirs: object) -> bool:
    if isinstance(ours, str) and isinstance(theirs, str):
        return normalize_key_text(ours) == normalize_key_text(theirs)
    return ours == theirs


def _fill_gaps[T: ProfileEntity](current: T, incoming: T) -> T:
    changes = {
        attribute.name: getattr(incoming, attribute.name)
        for attribute in fields(current)
        if attribute.name != "id"
        and _is_informative(attribute.name, getattr(incoming, attribute.name))
        and not _is_informative(attribute.name, getattr(current, attribute.name))
    }
    return replace(current, **changes) if changes else current


def _merge_fields[T: ProfileEntity](current: T, incoming: T) -> T:
    changes: dict[str, object] = {}
    for attribute in fields(current):
        if attribute.name == "id":
            continue
        value = getattr(incoming, attribute.name)
        if not _is_informative(attribute.name, value):
            continue
        if value != getattr(current, attribute.name):
            changes[attribute.name] = value
    if not changes:
        return current
    return replace(current, **changes)


def _merge_personal_info(current: PersonalInfo, incoming: PersonalInfo) -> PersonalInfo:
    changes = {
        name: getattr(incoming, name)
        for name in current.field_names()
        if is_present(getattr(incoming, name))
    }
    return replace(current, **changes)


def _is_informative(name: str, value: object) -> bool:
    if not is_present(value):
        return False
    placeholder = _PLACEHOLDER_VALUES.get(name)
    return placeholder is None or value != placeholder


__all__ = ["merge_profiles", "next_timestamp"]
