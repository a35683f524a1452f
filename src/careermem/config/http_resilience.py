"""Retry, throttling and cache settings for outbound HTTP clients."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

TRANSIENT_STATUSES = frozenset({429, 500, 502, 503, 504})


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    """Exponential backoff for transient failures.

    POST is retried as well: a Gemini ``generateContent`` call has no side effects.
    """

    total: int = 3
    backoff_factor: float = 0.5
    max_backoff_wait: float = 30.0
    retry_methods: frozenset[str] = frozenset({"GET", "POST"})
    retry_statuses: frozenset[int] = TRANSIENT_STATUSES


@dataclass(slots=True, frozen=True)
class RateLimit:
    max_calls: int
    per_seconds: float = 1.0


@dataclass(slots=True, frozen=True)
class CacheConfig:
    """Response cache; ``persistent`` keeps it in the data directory across runs."""

    ttl_seconds: float | None = None
    persistent: bool = False


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    name: str
    base_url: str | None = None
    timeout_seconds: float = 30.0
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    ratelimit: RateLimit | None = None
    cache: CacheConfig | None = None
    default_headers: Mapping[str, str] | None = None

    def single_attempt(self, *, timeout_seconds: float) -> ResilienceConfig:
        """Same client settings without retries, for one-shot checks."""

        return replace(
            self, timeout_seconds=timeout_seconds, retry=replace(self.retry, total=0)
        )
