"""Pydantic models describing the GitHub REST payloads we read."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class GitHubBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class OwnerPayload(GitHubBaseModel):
    login: str = ""


class RepoPayload(GitHubBaseModel):
    full_name: str
    name: str = ""
    owner: OwnerPayload | None = None
    description: str | None = None
    html_url: str = ""
    homepage: str | None = None
    language: str | None = None
    stargazers_count: int = 0
    forks_count: int = 0
    pushed_at: str | None = None
    topics: list[str] = Field(default_factory=list[str])
    has_issues: bool = False
    archived: bool = False
    fork: bool = False
    private: bool = False


class ErrorResponse(GitHubBaseModel):
    message: str = "Unknown GitHub API error"
    documentation_url: str | None = None


__all__ = ["ErrorResponse", "OwnerPayload", "RepoPayload"]
