"""Translate GitHub repository payloads into domain records."""

from __future__ import annotations

from typing import TYPE_CHECKING

from careermem.domain.model import ExternalRepository

if TYPE_CHECKING:
    from .schema import RepoPayload


def translate_repository(payload: RepoPayload) -> ExternalRepository:
    owner = payload.owner.login if payload.owner else payload.full_name.partition("/")[0]
    return ExternalRepository(
        full_name=payload.full_name,
        name=payload.name or payload.full_name.rpartition("/")[2],
        owner=owner,
        description=payload.description or "",
        html_url=payload.html_url,
        homepage=payload.homepage or "",
        language=payload.language or "",
        stars=payload.stargazers_count,
        forks=payload.forks_count,
        pushed_at=payload.pushed_at or "",
        topics=list(payload.topics),
        has_issues=payload.has_issues,
        archived=payload.archived,
        fork=payload.fork,
        private=payload.private,
    )
