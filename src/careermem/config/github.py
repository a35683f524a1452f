"""GitHub configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field

from .env import require_env_vars
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig

GITHUB_BASE_URL = "https://api.github.com"
GITHUB_CACHE_TTL_SECONDS = 5 * 60


def _default_resilience() -> ResilienceConfig:
    return ResilienceConfig(
        name="github",
        base_url=GITHUB_BASE_URL,
        timeout_seconds=15.0,
        ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
        cache=CacheConfig(ttl_seconds=GITHUB_CACHE_TTL_SECONDS),
        default_headers={"Accept": "application/vnd.github+json"},
    )


@dataclass(frozen=True, slots=True)
class GitHubConfig:
    access_token: str
    resilience: ResilienceConfig = field(default_factory=_default_resilience)

    def __repr__(self) -> str:
        return "GitHubConfig(access_token='***')"


def get_github_config() -> GitHubConfig:
    values = require_env_vars(
        ("GITHUB_TOKEN",),
        hint="Link a GitHub account and export its access token as GITHUB_TOKEN",
    )
    return GitHubConfig(access_token=values["GITHUB_TOKEN"])
