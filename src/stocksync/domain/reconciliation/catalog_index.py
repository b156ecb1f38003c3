"""Catalog index construction.

Responsibilities of this stage:
- page the catalog listing port until it reports no further pages
- index every usable record by verbatim SKU and by normalized SKU
- skip records without a SKU or a parsed item id
"""

from __future__ import annotations

import time
from logging import getLogger
from typing import TYPE_CHECKING

from stocksync.domain.errors import ProtocolError
from stocksync.domain.types import CatalogIndex, CatalogRecord

from .normalize import normalize_sku

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from stocksync.domain.ports import CatalogEntry, CatalogListingSource

DEFAULT_PAGE_DELAY_SECONDS = 0.08

log = getLogger(__name__)


def build_catalog_index(
    source: CatalogListingSource,
    *,
    page_delay: float = DEFAULT_PAGE_DELAY_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
) -> CatalogIndex:
    """Page ``source`` to exhaustion and return the resulting index.

    ``TransportError`` and ``ProtocolError`` raised by the source propagate.
    """

    index = CatalogIndex()
    cursor: str | None = None
    pages = 0

    while True:
        page = source.fetch_page(cursor)
        pages += 1
        add_entries(index, page.entries)
        if page.has_next_page and not page.end_cursor:
            raise ProtocolError(f"Catalog page {pages} reports more pages but no cursor")
        sleep(page_delay)
        if not page.has_next_page:
            break
        cursor = page.end_cursor

    log.info(
        "Catalog index built: pages=%s, records=%s, skipped=%s, unique_skus=%s",
        pages,
        index.records_seen,
        index.records_skipped,
        len(index.exact_by_sku),
    )
    return index


def add_entries(index: CatalogIndex, entries: Iterable[CatalogEntry]) -> None:
    for entry in entries:
        index.records_seen += 1
        record = _record_for(entry)
        if record is None:
            index.records_skipped += 1
            continue
        add_record(index, record)


def add_record(index: CatalogIndex, record: CatalogRecord) -> None:
    index.exact_by_sku[record.sku] = record.item_id
    key = normalize_sku(record.sku)
    if key:
        index.item_ids_by_normalized_sku.setdefault(key, []).append(record.item_id)


def _record_for(entry: CatalogEntry) -> CatalogRecord | None:
    sku = (entry.sku or "").strip()
    if not sku or not entry.item_id:
        return None
    return CatalogRecord(sku=sku, item_id=entry.item_id)
