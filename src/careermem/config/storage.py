"""Locations of the local database and HTTP cache."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path

from .env import optional_env_var

DATABASE_FILENAME = "careermem.db"
HTTP_CACHE_FILENAME = "http_cache.db"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """Data directory for careermem files.

    ``database_uri_override`` (from ``DATABASE_URI``) points the memory store at
    another database; the HTTP cache always lives in the data directory.
    """

    data_dir: Path
    database_uri_override: str | None = None

    @property
    def root(self) -> Path:
        root = self.data_dir.expanduser().resolve()
        root.mkdir(parents=True, exist_ok=True)
        return root

    @property
    def database_file(self) -> Path:
        return self.root / DATABASE_FILENAME

    @property
    def http_cache_file(self) -> Path:
        return self.root / HTTP_CACHE_FILENAME

    @property
    def database_uri(self) -> str:
        if self.database_uri_override:
            return self.database_uri_override
        return f"sqlite+pysqlite:///{self.database_file}"


def _platform_data_home() -> Path:
    if sys.platform == "win32":
        return Path(os.getenv("LOCALAPPDATA") or Path.home() / "AppData" / "Local")
    return Path(os.getenv("XDG_DATA_HOME") or Path.home() / ".local" / "share")


def get_storage_config() -> StorageConfig:
    data_dir = optional_env_var("CAREERMEM_DATA_DIR", str(_platform_data_home() / "careermem"))
    return StorageConfig(
        data_dir=Path(data_dir),
        database_uri_override=optional_env_var("DATABASE_URI", "") or None,
    )
