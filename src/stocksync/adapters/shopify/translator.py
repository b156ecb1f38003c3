"""Translate between Shopify payloads and reconciliation port types."""

from __future__ import annotations

import re
from logging import getLogger
from typing import TYPE_CHECKING

from stocksync.domain.ports import CatalogEntry, CatalogPage, InventoryUserError
from stocksync.domain.types import whole_units

if TYPE_CHECKING:
    from stocksync.domain.ports import QuantityUpdate

    from .schema import ProductVariantsData, UserErrorPayload

INVENTORY_ITEM_GID_PREFIX = "gid://shopify/InventoryItem/"
LOCATION_GID_PREFIX = "gid://shopify/Location/"

_INVENTORY_ITEM_ID = re.compile(r"InventoryItem/(\d+)")
_LOCATION_ID = re.compile(r"Location/(\d+)")

log = getLogger(__name__)


def inventory_item_gid(item_id: str) -> str:
    return f"{INVENTORY_ITEM_GID_PREFIX}{item_id}"


def location_gid(location_id: str) -> str:
    return f"{LOCATION_GID_PREFIX}{location_id}"


def parse_inventory_item_id(gid: str | None) -> str | None:
    """Return the numeric id inside an inventory item GID, or ``None``."""

    if not gid:
        return None
    match = _INVENTORY_ITEM_ID.search(gid)
    return match.group(1) if match else None


def parse_location_id(value: str) -> str | None:
    """Accept a bare numeric location id or a location GID."""

    stripped = value.strip()
    if stripped.isdigit():
        return stripped
    match = _LOCATION_ID.search(stripped)
    return match.group(1) if match else None


def catalog_page(data: ProductVariantsData) -> CatalogPage:
    connection = data.product_variants
    entries: list[CatalogEntry] = []
    for edge in connection.edges:
        node = edge.node
        gid = node.inventory_item.id if node.inventory_item is not None else None
        item_id = parse_inventory_item_id(gid)
        if gid and item_id is None:
            log.debug("Unparsable inventory item id %r for SKU %r", gid, node.sku)
        entries.append(CatalogEntry(sku=node.sku, item_id=item_id))
    return CatalogPage(
        entries=entries,
        has_next_page=connection.page_info.has_next_page,
        end_cursor=connection.page_info.end_cursor,
    )


def set_quantities_input(update: QuantityUpdate) -> dict[str, object]:
    return {
        "name": update.name,
        "reason": update.reason,
        "referenceDocumentUri": update.reference_document_uri,
        "ignoreCompareQuantity": update.ignore_compare_quantity,
        "quantities": [
            {
                "inventoryItemId": inventory_item_gid(change.item_id),
                "locationId": location_gid(change.location_id),
                "quantity": whole_units(change.quantity),
            }
            for change in update.changes
        ],
    }


def user_error(payload: UserErrorPayload) -> InventoryUserError:
    return InventoryUserError(
        message=payload.message,
        field=tuple(payload.field or ()),
        code=payload.code,
    )
