"""Identity keys for recognising a restated entity that arrived under a new id."""

from __future__ import annotations

import unicodedata
from functools import singledispatch

from careermem.domain.model import (
    COMPANY_PLACEHOLDER,
    ROLE_PLACEHOLDER,
    AnalyzedExternalProject,
    Education,
    Experience,
    LeadershipActivity,
    Project,
)

from .contracts import IdentityKey

_PLACEHOLDERS = frozenset(_p.casefold() for _p in (ROLE_PLACEHOLDER, COMPANY_PLACEHOLDER))


@singledispatch
def identity_key(_entity: object) -> IdentityKey | None:
    """Return the normalized identity key for ``entity`` or ``None`` if it has none."""

    return None


@identity_key.register
def _(experience: Experience) -> IdentityKey | None:
    return _key("experience", experience.role, experience.company)


@identity_key.register
def _(education: Education) -> IdentityKey | None:
    return _key("education", education.degree, education.school)


@identity_key.register
def _(project: Project) -> IdentityKey | None:
    return _key("project", project.name)


@identity_key.register
def _(activity: LeadershipActivity) -> IdentityKey | None:
    return _key("leadership", activity.name)


@identity_key.register
def _(project: AnalyzedExternalProject) -> IdentityKey | None:
    return _key("external_project", project.id)


def normalize_key_text(value: str | None) -> str | None:
    """NFKC, casefold, drop punctuation and collapse whitespace; placeholders become ``None``."""

    if value is None:
        return None
    text = unicodedata.normalize("NFKC", value)
    text = text.casefold()
    text = "".join(ch for ch in text if not unicodedata.category(ch).startswith("P"))
    text = " ".join(text.split())
    if not text or text in _PLACEHOLDERS:
        return None
    return text


def _key(namespace: str, *values: str) -> IdentityKey | None:
    parts = tuple(normalize_key_text(value) for value in values)
    # incomplete keys never match
    if any(part is None for part in parts):
        return None
    return (namespace, *parts)
