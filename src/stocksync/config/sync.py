"""Synchronization settings for the inventory sync run."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from stocksync.domain.reconciliation.bulk_write import (
    DEFAULT_CHUNK_DELAY_SECONDS,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_FAILURE_BACKOFF_SECONDS,
    DEFAULT_REFERENCE_DOCUMENT_URI,
)
from stocksync.domain.reconciliation.catalog_index import DEFAULT_PAGE_DELAY_SECONDS
from stocksync.domain.reconciliation.engine import DEFAULT_MAX_ITEMS

from .env import env_flag, env_int, optional_env_var
from .errors import InvalidConfigurationError

DEFAULT_FEED_PATH = "/tmp/recmar.csv"  # noqa: S108
DEFAULT_SKU_MAP_PATH = "sku-map.csv"
DEFAULT_REPORT_DIR = "out"
DEFAULT_MATCH_MODE = "normalize"
MATCH_MODES = frozenset({"exact", "normalize", "prefer-exact"})


@dataclass(frozen=True, slots=True)
class SyncSettings:
    """Everything one sync run needs besides the Shopify credentials."""

    feed_path: Path = Path(DEFAULT_FEED_PATH)
    sku_map_path: Path = Path(DEFAULT_SKU_MAP_PATH)
    report_dir: Path = Path(DEFAULT_REPORT_DIR)
    match_mode: str = DEFAULT_MATCH_MODE
    chunk_size: int = DEFAULT_CHUNK_SIZE
    full_sweep: bool = True
    max_items: int = DEFAULT_MAX_ITEMS
    write_reports: bool = True
    reference_document_uri: str = DEFAULT_REFERENCE_DOCUMENT_URI
    page_delay_seconds: float = DEFAULT_PAGE_DELAY_SECONDS
    chunk_delay_seconds: float = DEFAULT_CHUNK_DELAY_SECONDS
    failure_backoff_seconds: float = DEFAULT_FAILURE_BACKOFF_SECONDS


def get_sync_settings() -> SyncSettings:
    mode = (optional_env_var("SKU_MATCH_MODE") or DEFAULT_MATCH_MODE).lower()
    if mode not in MATCH_MODES:
        raise InvalidConfigurationError("SKU_MATCH_MODE", mode, "exact or normalize")
    return SyncSettings(
        feed_path=Path(optional_env_var("FEED_CSV") or DEFAULT_FEED_PATH),
        sku_map_path=Path(optional_env_var("SKU_MAP_CSV") or DEFAULT_SKU_MAP_PATH),
        report_dir=Path(optional_env_var("REPORT_DIR") or DEFAULT_REPORT_DIR),
        match_mode=mode,
        chunk_size=env_int("GQL_BATCH", default=DEFAULT_CHUNK_SIZE, minimum=1),
        full_sweep=env_flag("FULL_SWEEP", default=True),
        max_items=env_int("MAX_ITEMS", default=DEFAULT_MAX_ITEMS, minimum=0),
        write_reports=env_flag("REPORT_CSV", default=True),
        reference_document_uri=optional_env_var("REFERENCE_DOCUMENT_URI")
        or DEFAULT_REFERENCE_DOCUMENT_URI,
    )
