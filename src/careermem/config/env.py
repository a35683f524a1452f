"""Read settings from the process environment.

Blank values count as unset everywhere, so ``FOO=`` in a ``.env`` file behaves
like leaving ``FOO`` out.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from .errors import InvalidConfigurationError, MissingConfigurationError

if TYPE_CHECKING:
    from collections.abc import Iterable


def _read(name: str) -> str | None:
    value = (os.getenv(name) or "").strip()
    return value or None


def require_env_vars(names: Iterable[str], *, hint: str | None = None) -> dict[str, str]:
    """Map each of ``names`` to its value, failing once for all absent names."""

    found = {name: _read(name) for name in names}
    absent = sorted(name for name, value in found.items() if value is None)
    if absent:
        message = "Missing configuration for: " + ", ".join(absent)
        raise MissingConfigurationError(f"{message}. {hint}" if hint else message)
    return {name: value for name, value in found.items() if value is not None}


def optional_env_var(name: str, default: str) -> str:
    return _read(name) or default


def positive_int_env_var(name: str, default: int) -> int:
    raw = _read(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        value = 0
    if value < 1:
        raise InvalidConfigurationError(f"{name} must be a positive integer, got {raw!r}")
    return value
