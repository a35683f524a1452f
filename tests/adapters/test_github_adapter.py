from __future__ import annotations

import asyncio
from collections.abc import Callable  # noqa: TC003

import httpx
import pytest

from careermem.adapters.github import (
    GitHubAPIError,
    GitHubAuthenticationError,
    GitHubFetcher,
    RepoPayload,
    translate_repository,
)
from careermem.adapters.github.client import PAGE_SIZE
from careermem.adapters.http_resilience import ResilientClient
from careermem.config import GitHubConfig, ResilienceConfig
from careermem.config.github import GITHUB_BASE_URL


def _make_client_factory(
    handler: Callable[[httpx.Request], httpx.Response],
) -> Callable[[ResilienceConfig], ResilientClient]:
    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        client = ResilientClient(resilience)
        client._client = httpx.AsyncClient(  # noqa: SLF001  # type: ignore[reportPrivateUsage]
            base_url=resilience.base_url or "",
            transport=httpx.MockTransport(async_handler),
        )
        return client

    return factory


def _fetcher(handler: Callable[[httpx.Request], httpx.Response]) -> GitHubFetcher:
    config = GitHubConfig(
        access_token="tok",
        resilience=ResilienceConfig(name="github-test", base_url=GITHUB_BASE_URL),
    )
    return GitHubFetcher(config=config, client_factory=_make_client_factory(handler))


def _repo_payload(full_name: str, **overrides: object) -> dict[str, object]:
    owner, name = full_name.split("/")
    return {
        "full_name": full_name,
        "name": name,
        "owner": {"login": owner},
        "description": None,
        "html_url": f"https://github.com/{full_name}",
        "language": "Python",
        "stargazers_count": 3,
        "forks_count": 1,
        "pushed_at": "2024-04-01T10:00:00Z",
        "topics": ["cli"],
        "fork": False,
        "private": False,
        **overrides,
    }


def test_fetch_lists_repositories_and_readmes() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        path = request.url.path
        if path == "/user/repos":
            return httpx.Response(
                200,
                json=[
                    _repo_payload("octo/tool"),
                    _repo_payload("octo/empty"),
                    _repo_payload("octo/forked", fork=True),
                    _repo_payload("octo/secret", private=True),
                ],
            )
        if path == "/repos/octo/tool/contents/README.md":
            return httpx.Response(200, text="# Tool")
        if path == "/repos/octo/empty/contents/README.md":
            return httpx.Response(404, json={"message": "Not Found"})
        raise AssertionError(f"unexpected request {path}")

    result = asyncio.run(_fetcher(handler)())

    assert [repo.full_name for repo in result.repositories] == [
        "octo/tool",
        "octo/empty",
        "octo/forked",
        "octo/secret",
    ]
    assert result.readmes == {"octo/tool": "# Tool"}
    listing = requests[0]
    assert listing.headers["Authorization"] == "Bearer tok"
    assert dict(listing.url.params) == {
        "type": "owner",
        "sort": "updated",
        "per_page": str(PAGE_SIZE),
        "page": "1",
    }
    readme_path = "/repos/octo/tool/contents/README.md"
    readme_request = next(r for r in requests if r.url.path == readme_path)
    assert readme_request.headers["Accept"] == "application/vnd.github.raw"


def test_listing_follows_pages_until_short_page() -> None:
    pages: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path != "/user/repos":
            return httpx.Response(404)
        page = request.url.params["page"]
        pages.append(page)
        if page == "1":
            return httpx.Response(
                200, json=[_repo_payload(f"octo/r{i}", fork=True) for i in range(PAGE_SIZE)]
            )
        return httpx.Response(200, json=[_repo_payload("octo/last", fork=True)])

    result = asyncio.run(_fetcher(handler)())

    assert pages == ["1", "2"]
    assert len(result.repositories) == PAGE_SIZE + 1


def test_listing_stops_at_max_repositories() -> None:
    pages: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path != "/user/repos":
            return httpx.Response(404)
        pages.append(request.url.params["page"])
        return httpx.Response(
            200, json=[_repo_payload(f"octo/r{i}", fork=True) for i in range(PAGE_SIZE)]
        )

    result = asyncio.run(_fetcher(handler)(max_repositories=3))

    assert pages == ["1"]
    assert [repo.full_name for repo in result.repositories] == ["octo/r0", "octo/r1", "octo/r2"]


def test_unauthorized_raises_authentication_error() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"message": "Bad credentials"})

    with pytest.raises(GitHubAuthenticationError, match="GITHUB_TOKEN") as excinfo:
        asyncio.run(_fetcher(handler)())

    assert excinfo.value.status_code == 401


def test_readme_unauthorized_propagates() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/user/repos":
            return httpx.Response(200, json=[_repo_payload("octo/tool")])
        return httpx.Response(401, json={"message": "Bad credentials"})

    with pytest.raises(GitHubAuthenticationError):
        asyncio.run(_fetcher(handler)())


def test_readme_server_error_is_treated_as_missing() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/user/repos":
            return httpx.Response(200, json=[_repo_payload("octo/tool")])
        return httpx.Response(502, text="bad gateway")

    result = asyncio.run(_fetcher(handler)())

    assert result.readmes == {}
    assert len(result.repositories) == 1


def test_listing_error_reports_message() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(403, json={"message": "API rate limit exceeded"})

    with pytest.raises(GitHubAPIError, match="API rate limit exceeded") as excinfo:
        asyncio.run(_fetcher(handler)())

    assert excinfo.value.status_code == 403


def test_unexpected_listing_payload_raises() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"not": "a list"})

    with pytest.raises(GitHubAPIError, match="Unexpected"):
        asyncio.run(_fetcher(handler)())


def test_translate_repository_maps_fields() -> None:
    payload = RepoPayload.model_validate(
        _repo_payload("octo/tool", description="CLI", homepage="https://tool.dev", archived=True)
    )

    repository = translate_repository(payload)

    assert repository.full_name == "octo/tool"
    assert repository.owner == "octo"
    assert repository.description == "CLI"
    assert repository.homepage == "https://tool.dev"
    assert repository.stars == 3
    assert repository.forks == 1
    assert repository.topics == ["cli"]
    assert repository.archived is True


def test_translate_repository_fills_missing_values() -> None:
    payload = RepoPayload.model_validate({"full_name": "octo/bare"})

    repository = translate_repository(payload)

    assert repository.owner == "octo"
    assert repository.name == "bare"
    assert repository.description == ""
    assert repository.language == ""
    assert repository.topics == []
