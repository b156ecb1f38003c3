"""Retry, pacing and caching settings for the Shopify HTTP clients."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

import httpx

if TYPE_CHECKING:
    from collections.abc import Mapping

ResponseHook = Callable[[httpx.Response], Awaitable[None]]

_READ_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    """Transport-level retries for transient HTTP failures.

    Only read methods are retried unless ``retry_posts`` is set; a failed
    GraphQL ``POST`` surfaces to the caller after one attempt.
    """

    total: int = 4
    backoff_factor: float = 0.5
    max_backoff_wait: float = 30.0
    respect_retry_after_header: bool = True
    retry_posts: bool = False
    status_forcelist: frozenset[int] = field(
        default_factory=lambda: frozenset({429, 500, 502, 503, 504})
    )
    retry_on_exceptions: tuple[type[httpx.HTTPError], ...] = (
        httpx.TimeoutException,
        httpx.NetworkError,
        httpx.RemoteProtocolError,
    )
    backoff_jitter: float = 1.0

    @property
    def allowed_methods(self) -> frozenset[str]:
        return _READ_METHODS | {"POST"} if self.retry_posts else _READ_METHODS


@dataclass(slots=True, frozen=True)
class RateLimit:
    """At most ``max_calls`` requests per ``per_seconds`` window."""

    max_calls: int
    per_seconds: float


@dataclass(slots=True, frozen=True)
class CacheConfig:
    """Response cache for read-only lookups.

    Every 2xx response is stored regardless of its cache headers and
    expires after ``ttl_seconds``. ``sqlite_path`` defaults to the file under
    the stocksync data directory.
    """

    backend: Literal["sqlite", "memory"] = "sqlite"
    ttl_seconds: float | None = 3600.0
    sqlite_path: str | None = None


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    name: str
    base_url: str | None = None
    timeout_seconds: float = 30.0
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    ratelimit: RateLimit | None = None
    cache: CacheConfig | None = None
    response_hooks: tuple[ResponseHook, ...] = ()
    default_headers: Mapping[str, str] | None = None
