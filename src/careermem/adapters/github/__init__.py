"""GitHub adapter package."""

from __future__ import annotations

from .client import GitHubAPIError, GitHubAuthenticationError, GitHubFetcher
from .schema import RepoPayload
from .translator import translate_repository

__all__ = [
    "GitHubAPIError",
    "GitHubAuthenticationError",
    "GitHubFetcher",
    "RepoPayload",
    "translate_repository",
]
