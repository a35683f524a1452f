"""Gemini (oracle) configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field

from .env import optional_env_var, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
GEMINI_TIMEOUT_SECONDS = 60.0
KEY_VALIDATION_TIMEOUT_SECONDS = 10.0


def _default_resilience(base_url: str = GEMINI_BASE_URL) -> ResilienceConfig:
    return ResilienceConfig(
        name="gemini",
        base_url=base_url,
        timeout_seconds=GEMINI_TIMEOUT_SECONDS,
        ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
        retry=RetryPolicy(total=2),
        cache=None,
    )


@dataclass(frozen=True, slots=True)
class GeminiConfig:
    """Credentials and endpoint settings for one oracle client.

    One instance per user/session; the key is never stored globally.
    """

    api_key: str
    model: str = DEFAULT_GEMINI_MODEL
    resilience: ResilienceConfig = field(default_factory=_default_resilience)

    def __repr__(self) -> str:
        return f"GeminiConfig(model={self.model!r}, api_key='***')"


def get_gemini_config(*, resilience: ResilienceConfig | None = None) -> GeminiConfig:
    values = require_env_vars(
        ("GEMINI_API_KEY",),
        hint="Set GEMINI_API_KEY to your Gemini API key to enable AI features",
    )
    base_url = optional_env_var("GEMINI_BASE_URL", GEMINI_BASE_URL)
    return GeminiConfig(
        api_key=values["GEMINI_API_KEY"],
        model=optional_env_var("GEMINI_MODEL", DEFAULT_GEMINI_MODEL),
        resilience=resilience or _default_resilience(base_url),
    )
