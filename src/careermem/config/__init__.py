"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_var, positive_int_env_var, require_env_vars
from .errors import ConfigurationError, InvalidConfigurationError, MissingConfigurationError
from .gemini import GeminiConfig, get_gemini_config
from .github import GitHubConfig, get_github_config
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .memory import MemoryConfig, get_memory_config
from .storage import StorageConfig, get_storage_config

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "GeminiConfig",
    "GitHubConfig",
    "InvalidConfigurationError",
    "MemoryConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "get_gemini_config",
    "get_github_config",
    "get_memory_config",
    "get_storage_config",
    "optional_env_var",
    "positive_int_env_var",
    "require_env_vars",
]
