from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from stocksync.app import sync_inventory
from stocksync.config import (
    ConfigurationError,
    configure_logging,
    get_shopify_config,
    get_sync_settings,
)
from stocksync.config.sync import MATCH_MODES

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from stocksync.config import SyncSettings

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Push feed inventory quantities to one Shopify location"
    )
    parser.add_argument(
        "--feed",
        type=Path,
        help="Path to the SKU,Quantity feed CSV (defaults to FEED_CSV)",
    )
    parser.add_argument(
        "--sku-map",
        type=Path,
        help="Path to the optional feed_sku,shopify_sku map (defaults to SKU_MAP_CSV)",
    )
    parser.add_argument(
        "--mode",
        choices=sorted(MATCH_MODES),
        help="SKU match mode (defaults to SKU_MATCH_MODE)",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        help="Quantities per inventorySetQuantities call (defaults to GQL_BATCH)",
    )
    parser.add_argument(
        "--full-sweep",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Process every matched SKU instead of the first --max-items",
    )
    parser.add_argument(
        "--max-items",
        type=int,
        help="Work items processed when full sweep is off (defaults to MAX_ITEMS)",
    )
    parser.add_argument(
        "--report-dir",
        type=Path,
        help="Directory for CSV reports (defaults to REPORT_DIR)",
    )
    parser.add_argument(
        "--no-report",
        action="store_true",
        help="Skip writing CSV reports",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log at DEBUG level",
    )
    return parser.parse_args(list(argv))


def _apply_overrides(settings: SyncSettings, args: argparse.Namespace) -> SyncSettings:
    if args.batch_size is not None and args.batch_size < 1:
        raise ValueError("Batch size must be at least 1")
    if args.max_items is not None and args.max_items < 0:
        raise ValueError("Max items must be non-negative")

    overrides: dict[str, object] = {}
    if args.feed is not None:
        overrides["feed_path"] = args.feed
    if args.sku_map is not None:
        overrides["sku_map_path"] = args.sku_map
    if args.mode is not None:
        overrides["match_mode"] = args.mode
    if args.batch_size is not None:
        overrides["chunk_size"] = args.batch_size
    if args.full_sweep is not None:
        overrides["full_sweep"] = args.full_sweep
    if args.max_items is not None:
        overrides["max_items"] = args.max_items
    if args.report_dir is not None:
        overrides["report_dir"] = args.report_dir
    if args.no_report:
        overrides["write_reports"] = False
    return replace(settings, **overrides)  # type: ignore[arg-type]


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    if parsed_args.verbose:
        configure_logging(level=logging.DEBUG, force=True)

    try:
        shopify = get_shopify_config()
        settings = _apply_overrides(get_sync_settings(), parsed_args)
    except (ConfigurationError, ValueError):
        log.exception("Configuration error")
        sys.exit(2)

    try:
        result = sync_inventory(shopify=shopify, settings=settings)
    except ConfigurationError:
        log.exception("Configuration error")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during sync")
        sys.exit(1)

    summary = result.summary
    log.info(
        "Inventory sync finished: updated=%s, errors=%s, misses=%s, ambiguous=%s",
        summary.updated,
        summary.errored,
        summary.missed,
        summary.ambiguous,
    )


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
