"""Shopify implementations of the reconciliation ports."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from stocksync.config.errors import ConfigurationError
from stocksync.domain.errors import ActivationError, ProtocolError
from stocksync.domain.ports import ActivationStatus

from .schema import InventoryActivateData, InventorySetQuantitiesData, ProductVariantsData
from .translator import (
    catalog_page,
    inventory_item_gid,
    location_gid,
    parse_location_id,
    set_quantities_input,
    user_error,
)

if TYPE_CHECKING:
    from stocksync.config.shopify import ShopifyConfig
    from stocksync.domain.ports import CatalogPage, InventoryUserError, QuantityUpdate

    from .client import ShopifyClient

DEFAULT_VARIANT_PAGE_SIZE = 250

PRODUCT_VARIANTS_QUERY = """
query ProductVariantSkus($first: Int!, $after: String) {
  productVariants(first: $first, after: $after) {
    pageInfo { hasNextPage endCursor }
    edges { cursor node { sku inventoryItem { id } } }
  }
}
"""

INVENTORY_SET_QUANTITIES_MUTATION = """
mutation InventorySet($input: InventorySetQuantitiesInput!) {
  inventorySetQuantities(input: $input) {
    userErrors { code field message }
  }
}
"""

INVENTORY_ACTIVATE_MUTATION = """
mutation InventoryActivate($inventoryItemId: ID!, $locationId: ID!) {
  inventoryActivate(inventoryItemId: $inventoryItemId, locationId: $locationId) {
    inventoryLevel { id }
    userErrors { field message }
  }
}
"""

log = getLogger(__name__)


@dataclass(slots=True)
class ShopifyCatalogSource:
    """Pages ``productVariants`` for SKU and inventory item id pairs."""

    client: ShopifyClient
    page_size: int = DEFAULT_VARIANT_PAGE_SIZE

    def fetch_page(self, cursor: str | None) -> CatalogPage:
        data = self.client.execute(
            PRODUCT_VARIANTS_QUERY,
            {"first": self.page_size, "after": cursor},
            model=ProductVariantsData,
        )
        return catalog_page(data)


@dataclass(slots=True)
class ShopifyInventoryWriter:
    """Bulk ``inventorySetQuantities`` writes."""

    client: ShopifyClient

    def set_quantities(self, update: QuantityUpdate) -> list[InventoryUserError]:
        data = self.client.execute(
            INVENTORY_SET_QUANTITIES_MUTATION,
            {"input": set_quantities_input(update)},
            model=InventorySetQuantitiesData,
        )
        payload = data.inventory_set_quantities
        if payload is None:
            raise ProtocolError("inventorySetQuantities returned no payload")
        return [user_error(error) for error in payload.user_errors]


@dataclass(slots=True)
class ShopifyLocationActivator:
    """Stocks inventory items at a location through ``inventoryActivate``."""

    client: ShopifyClient

    def activate(self, item_id: str, location_id: str) -> ActivationStatus:
        data = self.client.execute(
            INVENTORY_ACTIVATE_MUTATION,
            {
                "inventoryItemId": inventory_item_gid(item_id),
                "locationId": location_gid(location_id),
            },
            model=InventoryActivateData,
        )
        payload = data.inventory_activate
        if payload is None:
            raise ProtocolError("inventoryActivate returned no payload")
        if not payload.user_errors:
            return ActivationStatus.ACTIVATED
        messages = [error.message for error in payload.user_errors]
        if all(_is_already_active(message) for message in messages):
            return ActivationStatus.ALREADY_ACTIVE
        raise ActivationError("; ".join(messages), item_id=item_id)


def _is_already_active(message: str) -> bool:
    lowered = message.lower()
    return "already" in lowered and ("active" in lowered or "stocked" in lowered)


def resolve_location_id(config: ShopifyConfig, client: ShopifyClient) -> str:
    """Return the numeric id of the configured sync location.

    A configured id wins. Otherwise the display name is matched exactly (after
    trimming) against the REST locations listing.
    """

    if config.location_id:
        location_id = parse_location_id(config.location_id)
        if location_id is None:
            raise ConfigurationError(f"Invalid SHOPIFY_LOCATION_ID: {config.location_id}")
        return location_id

    wanted = (config.location_name or "").strip()
    response = client.list_locations()
    for location in response.locations:
        if location.name.strip() == wanted:
            log.info("Resolved location %r to id %s", wanted, location.id)
            return str(location.id)
    known = ", ".join(repr(location.name) for location in response.locations)
    raise ConfigurationError(f"Location not found: {wanted!r} (known: {known or 'none'})")
