"""Application orchestration entry points."""

from __future__ import annotations

import time
from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from stocksync.adapters.feed import read_feed_csv
from stocksync.adapters.reports import log_summary, write_reports
from stocksync.adapters.shopify import (
    ShopifyCatalogSource,
    ShopifyClient,
    ShopifyInventoryWriter,
    ShopifyLocationActivator,
    resolve_location_id,
)
from stocksync.adapters.sku_map import load_sku_map
from stocksync.config import get_shopify_config, get_sync_settings
from stocksync.domain.reconciliation import ReconcileOptions, WritePolicy, reconcile_inventory
from stocksync.domain.types import MatchMode

if TYPE_CHECKING:
    from stocksync.adapters.http_resilience import ResilientClient
    from stocksync.config import ResilienceConfig, ShopifyConfig, SyncSettings
    from stocksync.domain.types import SyncRunResult

ClientFactory = Callable[["ResilienceConfig"], "ResilientClient"]


log = getLogger(__name__)


def reconcile_options(settings: SyncSettings) -> ReconcileOptions:
    """Translate environment-level settings into engine options."""

    return ReconcileOptions(
        mode=MatchMode.parse(settings.match_mode),
        full_sweep=settings.full_sweep,
        max_items=settings.max_items,
        page_delay=settings.page_delay_seconds,
        write=WritePolicy(
            chunk_size=settings.chunk_size,
            reference_document_uri=settings.reference_document_uri,
            chunk_delay=settings.chunk_delay_seconds,
            failure_backoff=settings.failure_backoff_seconds,
        ),
    )


def sync_inventory(
    *,
    shopify: ShopifyConfig | None = None,
    settings: SyncSettings | None = None,
    client_factory: ClientFactory | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> SyncRunResult:
    """Synchronise feed quantities into Shopify using the configured adapters.

    Configuration problems (missing credentials, unknown location, unreadable
    feed) surface before any quantity is written.
    """

    effective_shopify = shopify or get_shopify_config()
    effective_settings = settings or get_sync_settings()
    options = reconcile_options(effective_settings)

    client = ShopifyClient(config=effective_shopify, client_factory=client_factory)
    location_id = resolve_location_id(effective_shopify, client)
    feed = read_feed_csv(effective_settings.feed_path)
    manual_map = load_sku_map(effective_settings.sku_map_path)

    log.info(
        "Starting inventory sync: store=%s, location_id=%s, feed_rows=%s, mode=%s, "
        "full_sweep=%s",
        effective_shopify.store,
        location_id,
        len(feed),
        options.mode,
        options.full_sweep,
    )

    result = reconcile_inventory(
        feed,
        catalog=ShopifyCatalogSource(client),
        writer=ShopifyInventoryWriter(client),
        activator=ShopifyLocationActivator(client),
        location_id=location_id,
        manual_map=manual_map,
        options=options,
        sleep=sleep,
    )

    log_summary(result.summary)
    if effective_settings.write_reports:
        write_reports(result, effective_settings.report_dir)

    return result
