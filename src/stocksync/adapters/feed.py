"""Inventory feed CSV reader."""

from __future__ import annotations

import csv
import math
from logging import getLogger
from typing import TYPE_CHECKING

from stocksync.config.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

SKU_COLUMN = "sku"
QUANTITY_COLUMN = "quantity"

log = getLogger(__name__)


class FeedFormatError(ConfigurationError):
    """Raised when the feed file is missing or lacks the required columns."""


def read_feed_csv(path: Path) -> dict[str, float]:
    """Read a ``SKU,Quantity`` CSV into an ordered ``sku -> quantity`` table.

    Column names are matched case-insensitively. A blank quantity reads as 0.
    Rows with a blank SKU or a non-numeric, non-finite or negative quantity
    are dropped. A SKU listed twice keeps its first position and last value.
    """

    if not path.is_file():
        raise FeedFormatError(f"Feed file not found: {path}")
    with path.open(newline="", encoding="utf-8-sig") as handle:
        return parse_feed_rows(csv.reader(handle), source=str(path))


def parse_feed_rows(rows: Iterable[list[str]], *, source: str = "<feed>") -> dict[str, float]:
    iterator = iter(rows)
    header = next(iterator, None)
    if header is None:
        log.warning("Feed %s is empty", source)
        return {}

    columns = [name.strip().lower() for name in header]
    if SKU_COLUMN not in columns or QUANTITY_COLUMN not in columns:
        raise FeedFormatError(f"Feed {source} header must include SKU,Quantity")
    sku_at = columns.index(SKU_COLUMN)
    quantity_at = columns.index(QUANTITY_COLUMN)

    table: dict[str, float] = {}
    dropped = 0
    for row in iterator:
        sku = row[sku_at].strip() if sku_at < len(row) else ""
        if not sku:
            continue
        raw_quantity = row[quantity_at] if quantity_at < len(row) else ""
        quantity = parse_quantity(raw_quantity)
        if quantity is None:
            dropped += 1
            log.debug("Dropping feed row %r: invalid quantity %r", sku, raw_quantity)
            continue
        table[sku] = quantity

    if dropped:
        log.warning("Dropped %s feed row(s) with invalid quantities from %s", dropped, source)
    log.info("Feed rows: %s (%s)", len(table), source)
    return table


def parse_quantity(value: str) -> float | None:
    stripped = value.strip()
    if not stripped:
        return 0.0
    try:
        quantity = float(stripped)
    except ValueError:
        return None
    if not math.isfinite(quantity) or quantity < 0:
        return None
    return quantity
