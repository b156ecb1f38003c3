from __future__ import annotations

import json
from collections.abc import Callable

import httpx
import pytest

from stocksync.adapters.shopify import (
    ShopifyCatalogSource,
    ShopifyClient,
    ShopifyInventoryWriter,
    ShopifyLocationActivator,
    resolve_location_id,
)
from stocksync.config.errors import ConfigurationError
from stocksync.domain.errors import ActivationError, ProtocolError
from stocksync.domain.ports import ActivationStatus, CatalogEntry, QuantityChange, QuantityUpdate
from stocksync.domain.reconciliation.bulk_write import WritePolicy, write_quantities
from stocksync.domain.types import WorkItem
from tests.support.fakes import no_sleep
from tests.support.shopify import Handler, graphql_data, make_config, mock_client_factory


def _variables(request: httpx.Request) -> dict[str, object]:
    return json.loads(request.content)["variables"]


def _activate_response(user_errors: list[dict[str, object]]) -> httpx.Response:
    level = None if user_errors else {"id": "gid://shopify/InventoryLevel/1"}
    return graphql_data(
        {"inventoryActivate": {"inventoryLevel": level, "userErrors": user_errors}}
    )


def test_catalog_source_passes_cursor_and_page_size(
    make_client: Callable[[Handler], ShopifyClient],
) -> None:
    seen: list[dict[str, object]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(_variables(request))
        return graphql_data(
            {
                "productVariants": {
                    "pageInfo": {"hasNextPage": True, "endCursor": "next"},
                    "edges": [
                        {
                            "cursor": "c1",
                            "node": {
                                "sku": "A-1",
                                "inventoryItem": {"id": "gid://shopify/InventoryItem/11"},
                            },
                        }
                    ],
                }
            }
        )

    source = ShopifyCatalogSource(make_client(handler), page_size=50)

    page = source.fetch_page("prev")

    assert seen == [{"first": 50, "after": "prev"}]
    assert page.entries == [CatalogEntry(sku="A-1", item_id="11")]
    assert page.has_next_page is True
    assert page.end_cursor == "next"


def test_inventory_writer_returns_user_errors(
    make_client: Callable[[Handler], ShopifyClient],
) -> None:
    seen: list[dict[str, object]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(_variables(request))
        return graphql_data(
            {
                "inventorySetQuantities": {
                    "userErrors": [
                        {
                            "code": "ITEM_NOT_STOCKED_AT_LOCATION",
                            "field": ["input", "quantities", "0", "locationId"],
                            "message": "The item is not stocked at the location.",
                        }
                    ]
                }
            }
        )

    writer = ShopifyInventoryWriter(make_client(handler))
    update = QuantityUpdate(
        changes=(QuantityChange(item_id="11", location_id="42", quantity=3),),
        reference_document_uri="stocksync://feed/sync",
    )

    (error,) = writer.set_quantities(update)

    assert error.code == "ITEM_NOT_STOCKED_AT_LOCATION"
    assert error.field == ("input", "quantities", "0", "locationId")
    payload = seen[0]["input"]
    assert isinstance(payload, dict)
    assert payload["quantities"] == [
        {
            "inventoryItemId": "gid://shopify/InventoryItem/11",
            "locationId": "gid://shopify/Location/42",
            "quantity": 3,
        }
    ]


def test_inventory_writer_rejects_missing_payload(
    make_client: Callable[[Handler], ShopifyClient],
) -> None:
    writer = ShopifyInventoryWriter(
        make_client(lambda _r: graphql_data({"inventorySetQuantities": None}))
    )
    update = QuantityUpdate(changes=(), reference_document_uri="stocksync://feed/sync")

    with pytest.raises(ProtocolError):
        writer.set_quantities(update)


def test_activator_statuses(make_client: Callable[[Handler], ShopifyClient]) -> None:
    activated = ShopifyLocationActivator(make_client(lambda _r: _activate_response([])))
    already = ShopifyLocationActivator(
        make_client(
            lambda _r: _activate_response(
                [{"field": ["inventoryItemId"], "message": "Item is already active at location"}]
            )
        )
    )

    assert activated.activate("11", "42") is ActivationStatus.ACTIVATED
    assert already.activate("11", "42") is ActivationStatus.ALREADY_ACTIVE


def test_activator_raises_on_refusal(make_client: Callable[[Handler], ShopifyClient]) -> None:
    seen: list[dict[str, object]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(_variables(request))
        return _activate_response([{"field": None, "message": "Location is inactive"}])

    activator = ShopifyLocationActivator(make_client(handler))

    with pytest.raises(ActivationError) as excinfo:
        activator.activate("11", "42")

    assert excinfo.value.item_id == "11"
    assert seen == [
        {
            "inventoryItemId": "gid://shopify/InventoryItem/11",
            "locationId": "gid://shopify/Location/42",
        }
    ]


def test_failed_write_chunks_are_sent_once(
    make_client: Callable[[Handler], ShopifyClient],
) -> None:
    posts: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        posts.append(request)
        return httpx.Response(503, text="unavailable")

    result = write_quantities(
        [WorkItem("A", "1", 1), WorkItem("B", "2", 2)],
        writer=ShopifyInventoryWriter(make_client(handler)),
        location_id="42",
        policy=WritePolicy(chunk_size=1),
        sleep=no_sleep,
    )

    assert [request.method for request in posts] == ["POST", "POST"]
    assert result.chunks == 2
    assert result.errored == 2
    assert result.updated == 0


def _locations_client() -> tuple[ShopifyClient, list[httpx.Request]]:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "locations": [
                    {"id": 1, "name": "Warehouse", "active": True},
                    {"id": 2, "name": "Main Store ", "active": True},
                ]
            },
        )

    config = make_config(location_id=None, location_name="Warehouse")
    return ShopifyClient(config=config, client_factory=mock_client_factory(handler)), seen


def test_resolve_location_by_name() -> None:
    client, seen = _locations_client()
    config = make_config(location_id=None, location_name=" Main Store")

    assert resolve_location_id(config, client) == "2"
    assert len(seen) == 1


def test_resolve_location_unknown_name() -> None:
    client, _ = _locations_client()
    config = make_config(location_id=None, location_name="Nowhere")

    with pytest.raises(ConfigurationError, match="Location not found"):
        resolve_location_id(config, client)


@pytest.mark.parametrize(
    ("configured", "expected"),
    [("42", "42"), ("gid://shopify/Location/7", "7")],
)
def test_resolve_location_by_id_skips_lookup(configured: str, expected: str) -> None:
    client, seen = _locations_client()

    assert resolve_location_id(make_config(location_id=configured), client) == expected
    assert seen == []


def test_resolve_location_invalid_id() -> None:
    client, _ = _locations_client()

    with pytest.raises(ConfigurationError, match="SHOPIFY_LOCATION_ID"):
        resolve_location_id(make_config(location_id="main"), client)
