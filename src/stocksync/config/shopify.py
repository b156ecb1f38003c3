"""Shopify Admin API configuration values."""

from __future__ import annotations

from dataclasses import dataclass, replace

from .env import optional_env_var, require_env_vars
from .errors import MissingConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy

DEFAULT_SHOPIFY_API_VERSION = "2025-07"
SHOPIFY_TIMEOUT_SECONDS = 30.0
SHOPIFY_ACCESS_TOKEN_HEADER = "X-Shopify-Access-Token"


@dataclass(frozen=True, slots=True)
class ShopifyConfig:
    """Holds Shopify Admin API configuration values.

    Exactly one sync location is addressed per run, either by numeric id or by
    its display name (resolved through the REST locations listing).
    """

    store: str
    admin_token: str
    api_version: str
    location_id: str | None
    location_name: str | None
    resilience: ResilienceConfig

    def __post_init__(self) -> None:
        if not self.location_id and not self.location_name:
            raise MissingConfigurationError(
                "Set either SHOPIFY_LOCATION_ID or SHOPIFY_LOCATION_NAME"
            )

    @property
    def admin_base_url(self) -> str:
        return f"https://{self.store}/admin/api/{self.api_version}"

    @property
    def graphql_url(self) -> str:
        return f"{self.admin_base_url}/graphql.json"

    @property
    def locations_url(self) -> str:
        return f"{self.admin_base_url}/locations.json"

    def lookup_resilience(self) -> ResilienceConfig:
        """Resilience settings for read-only REST lookups, cached on disk."""

        return replace(self.resilience, name=f"{self.resilience.name}-rest", cache=CacheConfig())


def default_shopify_resilience(
    *,
    store: str,
    admin_token: str,
    api_version: str,
) -> ResilienceConfig:
    return ResilienceConfig(
        name="shopify",
        base_url=f"https://{store}/admin/api/{api_version}",
        timeout_seconds=SHOPIFY_TIMEOUT_SECONDS,
        retry=RetryPolicy(total=4, retry_posts=False),
        ratelimit=RateLimit(max_calls=2, per_seconds=1.0),
        cache=None,
        default_headers={
            SHOPIFY_ACCESS_TOKEN_HEADER: admin_token,
            "Content-Type": "application/json",
        },
    )


def get_shopify_config(*, resilience: ResilienceConfig | None = None) -> ShopifyConfig:
    values = require_env_vars(("SHOPIFY_ADMIN_TOKEN", "SHOPIFY_STORE"))
    store = values["SHOPIFY_STORE"]
    admin_token = values["SHOPIFY_ADMIN_TOKEN"]
    api_version = optional_env_var("SHOPIFY_API_VERSION") or DEFAULT_SHOPIFY_API_VERSION
    return ShopifyConfig(
        store=store,
        admin_token=admin_token,
        api_version=api_version,
        location_id=optional_env_var("SHOPIFY_LOCATION_ID"),
        location_name=optional_env_var("SHOPIFY_LOCATION_NAME"),
        resilience=resilience
        or default_shopify_resilience(
            store=store,
            admin_token=admin_token,
            api_version=api_version,
        ),
    )
