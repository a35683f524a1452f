"""Console logging for the careermem CLI."""

from __future__ import annotations

import logging

from .env import optional_env_var
from .errors import InvalidConfigurationError

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# per-request chatter from the HTTP stack
_NOISY_LOGGERS = ("httpx", "httpcore", "hishel")


def _level_from_env() -> int:
    name = optional_env_var("CAREERMEM_LOG_LEVEL", "INFO").upper()
    level = logging.getLevelNamesMapping().get(name)
    if level is None:
        raise InvalidConfigurationError(f"Unknown CAREERMEM_LOG_LEVEL {name!r}")
    return level


def configure_logging(*, level: int | None = None, force: bool = False) -> None:
    """Set up root logging once; ``force=True`` replaces existing handlers.

    Without ``level`` the threshold comes from ``CAREERMEM_LOG_LEVEL``.
    """

    resolved = _level_from_env() if level is None else level
    logging.basicConfig(level=resolved, format=LOG_FORMAT, datefmt="%H:%M:%S", force=force)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(resolved, logging.WARNING))
