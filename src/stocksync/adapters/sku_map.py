"""Optional manual SKU map (``feed_sku,shopify_sku``)."""

from __future__ import annotations

import csv
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

log = getLogger(__name__)


def load_sku_map(path: Path) -> dict[str, str]:
    """Load the manual map, or an empty map when the file is absent or unreadable."""

    if not path.is_file():
        log.info("%s not found (optional)", path)
        return {}
    try:
        with path.open(newline="", encoding="utf-8-sig") as handle:
            mapping = parse_sku_map(handle)
    except (OSError, UnicodeDecodeError, csv.Error) as exc:
        log.warning("Could not load %s: %s", path, exc)
        return {}
    log.info("Loaded %s entries: %s", path.name, len(mapping))
    return mapping


def parse_sku_map(lines: Iterable[str]) -> dict[str, str]:
    """Parse map lines; blank lines and ``#`` comments are ignored.

    A leading ``feed_sku,shopify_sku`` header is optional.
    """

    content = [line for line in lines if line.strip() and not line.strip().startswith("#")]
    mapping: dict[str, str] = {}
    for position, row in enumerate(csv.reader(content)):
        if len(row) < 2:
            continue
        feed_sku = row[0].strip().strip('"')
        shopify_sku = row[1].strip().strip('"')
        if position == 0 and _is_header(feed_sku, shopify_sku):
            continue
        if feed_sku and shopify_sku:
            mapping[feed_sku] = shopify_sku
    return mapping


def _is_header(first: str, second: str) -> bool:
    return "feed_sku" in first.lower() and "shopify_sku" in second.lower()
