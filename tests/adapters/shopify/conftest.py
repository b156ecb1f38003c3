"""Shared fixtures for Shopify adapter tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from stocksync.adapters.shopify import ShopifyClient
from tests.support.shopify import make_config, mock_client_factory

if TYPE_CHECKING:
    from collections.abc import Callable

    from stocksync.config.shopify import ShopifyConfig
    from tests.support.shopify import Handler


@pytest.fixture
def shopify_config() -> ShopifyConfig:
    return make_config()


@pytest.fixture
def make_client(shopify_config: ShopifyConfig) -> Callable[[Handler], ShopifyClient]:
    def build(handler: Handler) -> ShopifyClient:
        return ShopifyClient(config=shopify_config, client_factory=mock_client_factory(handler))

    return build
