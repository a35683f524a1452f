"""Scalar and field coercers.

Every function here is pure and total: input that cannot be interpreted is
discarded locally (empty string / empty list) instead of raising.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping, Sequence
from datetime import datetime

from careermem.domain.model.base import from_epoch_ms, truncate_to_ms

_PLACEHOLDER_PATTERN = re.compile(r"\[(x|X|y|Y|z|Z|date|Date|\d+)?\]%?")
_SKILL_KEYS = ("name", "skill", "value")


def coerce_to_text(value: object) -> str:
    """Collapse ``value`` into trimmed text with template placeholders removed."""

    if value is None or value is False:
        return ""
    if isinstance(value, str):
        text = value
    elif isinstance(value, (list, tuple)):
        text = "\n".join(_element_text(element) for element in value if element is not None)
    elif isinstance(value, Mapping):
        text = _json_text(value)
    else:
        text = str(value)
    return _PLACEHOLDER_PATTERN.sub("", text).strip()


def coerce_to_plain_text(value: object) -> str:
    """Trimmed text for short scalar fields (names, dates, urls)."""

    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float)):
        return str(value)
    return coerce_to_text(value)


def coerce_to_list(value: object) -> list[object]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


def coerce_to_string_list(value: object) -> list[str]:
    """Trimmed, non-empty strings from a sequence; order preserved, duplicates kept."""

    texts = (coerce_to_plain_text(element) for element in coerce_to_list(value))
    return [text for text in texts if text]


def coerce_to_skill_set(value: object) -> list[str]:
    """Resolve each element to a skill name, drop blanks and exact duplicates.

    Case is deliberately not folded: ``"React"`` and ``"react"`` stay distinct.
    """

    skills: list[str] = []
    seen: set[str] = set()
    for element in coerce_to_list(value):
        skill = _skill_text(element).strip()
        if not skill or skill in seen:
            continue
        seen.add(skill)
        skills.append(skill)
    return skills


def coerce_to_int(value: object, *, default: int = 0, lower: int = 0, upper: int = 100) -> int:
    """Clamp a numeric-looking value into ``[lower, upper]``."""

    number: float
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        number = value
    elif isinstance(value, str):
        try:
            number = float(value.strip().rstrip("%"))
        except ValueError:
            return default
    else:
        return default
    if number != number:  # NaN
        return default
    return int(round(min(max(number, lower), upper)))


def coerce_to_bool(value: object) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"true", "yes", "1"}
    return bool(value)


def is_present(value: object) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple, dict)):
        return bool(value)
    return True


def resolve_field(record: Mapping[str, object], keys: Sequence[str]) -> object | None:
    """Return the value of the first key in ``keys`` that is present in ``record``."""

    for key in keys:
        value = record.get(key)
        if is_present(value):
            return value
    return None


def _skill_text(element: object) -> str:
    if isinstance(element, str):
        return element
    if isinstance(element, Mapping):
        resolved = resolve_field(element, _SKILL_KEYS)
        if resolved is None:
            resolved = next(iter(element.values()), "")
        return resolved if isinstance(resolved, str) else coerce_to_plain_text(resolved)
    if element is None:
        return ""
    return str(element)


def _element_text(element: object) -> str:
    if isinstance(element, str):
        return element
    if isinstance(element, Mapping):
        return _json_text(element)
    return str(element)


def _json_text(value: object) -> str:
    try:
        return json.dumps(value, ensure_ascii=False, default=str)
    except (TypeError, ValueError, RecursionError):
        return ""


def coerce_to_timestamp(value: object) -> datetime | None:
    """Interpret epoch milliseconds, ISO-8601 text or a ``datetime``; ``None`` if unusable."""

    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, datetime):
        return truncate_to_ms(value)
    if isinstance(value, (int, float)):
        return _from_number(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return _from_number(float(text))
        except ValueError:
            pass
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
        return coerce_to_timestamp(parsed)
    return None


def _from_number(value: float) -> datetime | None:
    if value != value or value <= 0:
        return None
    try:
        return from_epoch_ms(value)
    except (OverflowError, OSError, ValueError):
        return None
