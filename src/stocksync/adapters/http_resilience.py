"""Async HTTP client with retries, request pacing and an optional lookup cache."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from aiolimiter import AsyncLimiter
from hishel import AsyncSqliteStorage, FilterPolicy
from hishel import Response as CachedResponse
from hishel._policies import BaseFilter
from hishel.httpx import AsyncCacheClient
from httpx_retries import Retry, RetryTransport

from stocksync.common.storage import get_http_cache_path
from stocksync.config.http_resilience import (
    CacheConfig,
    RateLimit,
    ResilienceConfig,
    RetryPolicy,
)

if TYPE_CHECKING:
    from types import TracebackType

__all__ = [
    "CacheConfig",
    "RateLimit",
    "ResilienceConfig",
    "ResilientClient",
    "RetryPolicy",
    "build_retry",
    "log_call_limit",
]

CALL_LIMIT_HEADER = "X-Shopify-Shop-Api-Call-Limit"

log = getLogger(__name__)


def build_retry(policy: RetryPolicy) -> Retry:
    return Retry(
        total=policy.total,
        backoff_factor=policy.backoff_factor,
        max_backoff_wait=policy.max_backoff_wait,
        respect_retry_after_header=policy.respect_retry_after_header,
        allowed_methods=tuple(sorted(policy.allowed_methods)),
        status_forcelist=tuple(sorted(policy.status_forcelist)),
        retry_on_exceptions=policy.retry_on_exceptions,
        backoff_jitter=policy.backoff_jitter,
    )


async def log_call_limit(response: httpx.Response) -> None:
    """Log the REST leaky-bucket fill level Shopify reports, e.g. ``"32/40"``."""

    bucket = response.headers.get(CALL_LIMIT_HEADER)
    if bucket:
        log.debug("%s %s call limit %s", response.request.method, response.request.url, bucket)


class _SuccessOnlyFilter(BaseFilter[CachedResponse]):
    def needs_body(self) -> bool:
        return False

    def apply(self, item: CachedResponse, body: bytes | None) -> bool:  # noqa: ARG002
        return 200 <= item.status_code < 300


def build_cache_storage(config: CacheConfig) -> AsyncSqliteStorage:
    if config.backend == "memory":
        database_path = ":memory:"
    elif config.backend == "sqlite":
        database_path = config.sqlite_path or str(get_http_cache_path())
    else:
        raise ValueError(f"Unsupported cache backend: {config.backend}")
    return AsyncSqliteStorage(database_path=database_path, default_ttl=config.ttl_seconds)


class ResilientClient:
    """One ``httpx.AsyncClient`` configured from a ``ResilienceConfig``.

    Requests go through ``httpx_retries`` for transient failures and wait on
    an ``aiolimiter`` bucket when a rate limit is set. With a cache config
    the client is a ``hishel`` cache client that stores every 2xx response.
    ``transport`` replaces the network transport underneath the retries.
    """

    def __init__(
        self,
        config: ResilienceConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._limiter = (
            AsyncLimiter(config.ratelimit.max_calls, config.ratelimit.per_seconds)
            if config.ratelimit is not None
            else None
        )
        self._client = self._build_client(config, transport)

    @staticmethod
    def _build_client(
        config: ResilienceConfig,
        transport: httpx.AsyncBaseTransport | None,
    ) -> httpx.AsyncClient:
        kwargs: dict[str, object] = {
            "timeout": config.timeout_seconds,
            "transport": RetryTransport(transport=transport, retry=build_retry(config.retry)),
            "headers": dict(config.default_headers or {}),
            "event_hooks": {"response": list(config.response_hooks)},
        }
        if config.base_url is not None:
            kwargs["base_url"] = config.base_url

        if config.cache is None:
            return httpx.AsyncClient(**kwargs)  # type: ignore[arg-type]
        log.debug("HTTP client %s caches responses (%s)", config.name, config.cache.backend)
        return AsyncCacheClient(
            **kwargs,  # type: ignore[arg-type]
            storage=build_cache_storage(config.cache),
            policy=FilterPolicy(response_filters=[_SuccessOnlyFilter()]),
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
        json: object | None = None,
        params: dict[str, str] | None = None,
    ) -> httpx.Response:
        if self._limiter is None:
            return await self._client.request(method, url, json=json, params=params)
        async with self._limiter:
            return await self._client.request(method, url, json=json, params=params)

    async def get(self, url: str, *, params: dict[str, str] | None = None) -> httpx.Response:
        return await self.request("GET", url, params=params)

    async def post_json(self, url: str, payload: object) -> httpx.Response:
        return await self.request("POST", url, json=payload)
