"""HTTP client for the GitHub REST API."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import TypeAdapter, ValidationError

from careermem.adapters.http_resilience import ResilientClient
from careermem.config import GitHubConfig, get_github_config
from careermem.domain.ports import ExternalRepositoryFetcher, ExternalRepositoryFetchResult

from .schema import ErrorResponse, RepoPayload
from .translator import translate_repository

if TYPE_CHECKING:
    from collections.abc import Callable

    from careermem.config import ResilienceConfig
    from careermem.domain.model import ExternalRepository

log = getLogger(__name__)

PAGE_SIZE = 100
README_PATH = "README.md"
RAW_MEDIA_TYPE = "application/vnd.github.raw"

_REPO_LIST = TypeAdapter(list[RepoPayload])


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


class GitHubAPIError(RuntimeError):
    """Raised when the GitHub API rejects a request or returns an unexpected payload."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GitHubAuthenticationError(GitHubAPIError):
    """Raised on HTTP 401; the linked token is missing, expired or revoked."""


@dataclass(slots=True)
class GitHubFetcher:
    """List the authenticated user's own repositories and read their READMEs.

    READMEs are only requested for public, non-fork repositories since the
    others are never analyzed.
    """

    config: GitHubConfig = field(default_factory=get_github_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    async def __call__(
        self, *, max_repositories: int | None = None
    ) -> ExternalRepositoryFetchResult:
        async with self.client_factory(self.config.resilience) as client:
            repositories = await self._list_repositories(client, max_repositories)
            candidates = [repo for repo in repositories if not repo.fork and not repo.private]
            contents = await asyncio.gather(
                *(self._fetch_readme(client, repo.full_name) for repo in candidates)
            )
        readmes = {
            repo.full_name: text
            for repo, text in zip(candidates, contents, strict=True)
            if text is not None
        }
        log.info(
            "Fetched %d repositories and %d READMEs from GitHub", len(repositories), len(readmes)
        )
        return ExternalRepositoryFetchResult(repositories=repositories, readmes=readmes)

    @property
    def _auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.config.access_token}"}

    async def _list_repositories(
        self, client: ResilientClient, max_repositories: int | None
    ) -> list[ExternalRepository]:
        repositories: list[ExternalRepository] = []
        page = 1
        while True:
            params = {"type": "owner", "sort": "updated", "per_page": PAGE_SIZE, "page": page}
            response = await self._get(client, "user/repos", params=params)
            try:
                payloads = _REPO_LIST.validate_python(response.json())
            except (ValueError, ValidationError) as exc:
                raise GitHubAPIError("Unexpected GitHub repository listing payload") from exc
            for payload in payloads:
                repositories.append(translate_repository(payload))
                if max_repositories is not None and len(repositories) >= max_repositories:
                    return repositories
            if len(payloads) < PAGE_SIZE:
                return repositories
            page += 1

    async def _fetch_readme(self, client: ResilientClient, full_name: str) -> str | None:
        try:
            response = await self._get(
                client,
                f"repos/{full_name}/contents/{README_PATH}",
                headers={"Accept": RAW_MEDIA_TYPE},
            )
        except GitHubAuthenticationError:
            raise
        except GitHubAPIError as exc:
            if exc.status_code == httpx.codes.NOT_FOUND:
                log.debug("No README in %s", full_name)
            else:
                log.warning("Could not read README for %s: %s", full_name, exc)
            return None
        return response.text

    async def _get(
        self,
        client: ResilientClient,
        url: str,
        *,
        params: dict[str, str | int] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        request_headers = {**self._auth_headers, **(headers or {})}
        try:
            response = await client.get(url, params=params, headers=request_headers)
        except httpx.HTTPError as exc:
            raise GitHubAPIError(f"Could not reach the GitHub API: {exc}") from exc
        if response.status_code == httpx.codes.UNAUTHORIZED:
            log.error("GitHub rejected the access token")
            raise GitHubAuthenticationError(
                "GitHub authentication failed. "
                "Re-link your GitHub account or refresh GITHUB_TOKEN.",
                status_code=response.status_code,
            )
        if response.is_error:
            raise GitHubAPIError(_error_message(response), status_code=response.status_code)
        return response


def _error_message(response: httpx.Response) -> str:
    try:
        detail = ErrorResponse.model_validate(response.json()).message
    except (ValueError, ValidationError):
        detail = response.reason_phrase
    return f"GitHub API error {response.status_code}: {detail}"


if TYPE_CHECKING:
    _fetcher_check: ExternalRepositoryFetcher = GitHubFetcher()
