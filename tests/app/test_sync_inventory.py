from __future__ import annotations

import json
from typing import TYPE_CHECKING

import httpx
import pytest

from stocksync.adapters.reports import CHANGES_FILE, MISSES_FILE
from stocksync.app import reconcile_options, sync_inventory
from stocksync.config import ConfigurationError, SyncSettings
from stocksync.domain.types import MatchMode
from tests.support.fakes import no_sleep
from tests.support.shopify import Handler, graphql_data, make_config, mock_client_factory

if TYPE_CHECKING:
    from pathlib import Path


def _catalog_handler(writes: list[dict[str, object]]) -> Handler:
    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        if "productVariants" in body["query"]:
            return graphql_data(
                {
                    "productVariants": {
                        "pageInfo": {"hasNextPage": False, "endCursor": None},
                        "edges": [
                            {
                                "node": {
                                    "sku": "SKU1",
                                    "inventoryItem": {"id": "gid://shopify/InventoryItem/1"},
                                }
                            },
                            {
                                "node": {
                                    "sku": "NEW",
                                    "inventoryItem": {"id": "gid://shopify/InventoryItem/2"},
                                }
                            },
                        ],
                    }
                }
            )
        writes.append(body["variables"]["input"])
        return graphql_data({"inventorySetQuantities": {"userErrors": []}})

    return handler


def _settings(tmp_path: Path, **overrides: object) -> SyncSettings:
    feed = tmp_path / "feed.csv"
    feed.write_text("SKU,Quantity\nSKU1,10\nsku1,7\nOLD,3\nSKU3,5\n", encoding="utf-8")
    sku_map = tmp_path / "sku-map.csv"
    sku_map.write_text("feed_sku,shopify_sku\nOLD,NEW\n", encoding="utf-8")
    values: dict[str, object] = {
        "feed_path": feed,
        "sku_map_path": sku_map,
        "report_dir": tmp_path / "out",
    }
    values.update(overrides)
    return SyncSettings(**values)


def test_sync_inventory_writes_quantities_and_reports(tmp_path: Path) -> None:
    writes: list[dict[str, object]] = []

    result = sync_inventory(
        shopify=make_config(location_id="42"),
        settings=_settings(tmp_path),
        client_factory=mock_client_factory(_catalog_handler(writes)),
        sleep=no_sleep,
    )

    (write,) = writes
    assert write["quantities"] == [
        {
            "inventoryItemId": "gid://shopify/InventoryItem/1",
            "locationId": "gid://shopify/Location/42",
            "quantity": 7,
        },
        {
            "inventoryItemId": "gid://shopify/InventoryItem/2",
            "locationId": "gid://shopify/Location/42",
            "quantity": 3,
        },
    ]
    assert result.summary.updated == 2
    assert result.summary.matched_mapped == 1
    assert (tmp_path / "out" / CHANGES_FILE).is_file()
    assert (tmp_path / "out" / MISSES_FILE).read_text(encoding="utf-8").count("SKU3") == 1


def test_sync_inventory_without_reports(tmp_path: Path) -> None:
    sync_inventory(
        shopify=make_config(location_id="42"),
        settings=_settings(tmp_path, write_reports=False),
        client_factory=mock_client_factory(_catalog_handler([])),
        sleep=no_sleep,
    )

    assert not (tmp_path / "out").exists()


def test_sync_inventory_missing_feed_fails_before_writing(tmp_path: Path) -> None:
    writes: list[dict[str, object]] = []
    settings = _settings(tmp_path, feed_path=tmp_path / "absent.csv")

    with pytest.raises(ConfigurationError):
        sync_inventory(
            shopify=make_config(location_id="42"),
            settings=settings,
            client_factory=mock_client_factory(_catalog_handler(writes)),
            sleep=no_sleep,
        )

    assert writes == []


def test_reconcile_options_translates_settings(tmp_path: Path) -> None:
    options = reconcile_options(
        _settings(tmp_path, match_mode="prefer-exact", chunk_size=25, full_sweep=False)
    )

    assert options.mode is MatchMode.NORMALIZE
    assert options.write.chunk_size == 25
    assert options.full_sweep is False
