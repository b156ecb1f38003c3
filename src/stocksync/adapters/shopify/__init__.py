"""Shopify Admin API adapter."""

from __future__ import annotations

from .client import ShopifyClient
from .gateway import (
    ShopifyCatalogSource,
    ShopifyInventoryWriter,
    ShopifyLocationActivator,
    resolve_location_id,
)
from .schema import GraphQLResponse, LocationsResponse, ProductVariantsData
from .translator import inventory_item_gid, location_gid, parse_inventory_item_id

__all__ = [
    "GraphQLResponse",
    "LocationsResponse",
    "ProductVariantsData",
    "ShopifyCatalogSource",
    "ShopifyClient",
    "ShopifyInventoryWriter",
    "ShopifyLocationActivator",
    "inventory_item_gid",
    "location_gid",
    "parse_inventory_item_id",
    "resolve_location_id",
]
