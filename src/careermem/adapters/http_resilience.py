"""Outbound HTTP for the API adapters.

Every client retries transient failures through ``httpx-retries``; a rate limit
and a ``hishel`` response cache are added when the settings ask for them.
"""

from __future__ import annotations

from contextlib import nullcontext
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from aiolimiter import AsyncLimiter
from hishel import AsyncSqliteStorage, FilterPolicy
from hishel import Response as HishelCacheResponse
from hishel._policies import BaseFilter
from hishel.httpx import AsyncCacheClient
from httpx_retries import Retry, RetryTransport

from careermem.config import get_storage_config

if TYPE_CHECKING:
    from collections.abc import Mapping
    from types import TracebackType

    from careermem.config import CacheConfig, ResilienceConfig, RetryPolicy

log = getLogger(__name__)

type QueryParams = Mapping[str, str | int]


def build_retry(policy: RetryPolicy) -> Retry:
    return Retry(
        total=policy.total,
        backoff_factor=policy.backoff_factor,
        max_backoff_wait=policy.max_backoff_wait,
        allowed_methods=sorted(policy.retry_methods),
        status_forcelist=sorted(policy.retry_statuses),
    )


class _OnlySuccess(BaseFilter[HishelCacheResponse]):
    # error responses are never replayed from the cache

    def needs_body(self) -> bool:
        return False

    def apply(self, item: HishelCacheResponse, body: bytes | None) -> bool:  # noqa: ARG002
        return httpx.codes.is_success(item.status_code)


def _cache_storage(cache: CacheConfig) -> AsyncSqliteStorage:
    path = str(get_storage_config().http_cache_file) if cache.persistent else ":memory:"
    return AsyncSqliteStorage(database_path=path, default_ttl=cache.ttl_seconds)


def _open_client(config: ResilienceConfig) -> httpx.AsyncClient:
    transport = RetryTransport(retry=build_retry(config.retry))
    base_url = config.base_url or ""
    headers = dict(config.default_headers or {})
    if config.cache is None:
        return httpx.AsyncClient(
            base_url=base_url,
            timeout=config.timeout_seconds,
            headers=headers,
            transport=transport,
        )
    return AsyncCacheClient(
        base_url=base_url,
        timeout=config.timeout_seconds,
        headers=headers,
        transport=transport,
        storage=_cache_storage(config.cache),
        policy=FilterPolicy(response_filters=[_OnlySuccess()]),
    )


class ResilientClient:
    """Async HTTP client for one upstream API; use it as an async context manager."""

    def __init__(self, config: ResilienceConfig) -> None:
        self.config = config
        limit = config.ratelimit
        self._limiter = AsyncLimiter(limit.max_calls, limit.per_seconds) if limit else None
        self._client = _open_client(config)
        log.debug(
            "Opened %s client (retries=%d, cached=%s)",
            config.name,
            config.retry.total,
            config.cache is not None,
        )

    async def __aenter__(self) -> ResilientClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: QueryParams | None = None,
        headers: Mapping[str, str] | None = None,
        json: object = None,
    ) -> httpx.Response:
        async with self._limiter or nullcontext():
            return await self._client.request(
                method, url, params=params, headers=headers, json=json
            )

    async def get(
        self,
        url: str,
        *,
        params: QueryParams | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        return await self.request("GET", url, params=params, headers=headers)

    async def post(
        self,
        url: str,
        *,
        params: QueryParams | None = None,
        headers: Mapping[str, str] | None = None,
        json: object = None,
    ) -> httpx.Response:
        return await self.request("POST", url, params=params, headers=headers, json=json)
