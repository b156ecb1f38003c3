"""CSV reports and log summary for a finished sync run."""

from __future__ import annotations

import csv
from logging import getLogger
from typing import TYPE_CHECKING

from stocksync.domain.types import whole_units

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from stocksync.domain.types import RunSummary, SyncRunResult

CHANGES_FILE = "changes.csv"
MISSES_FILE = "misses.csv"
AMBIGUOUS_FILE = "ambiguous.csv"
ERRORS_FILE = "errors.csv"

log = getLogger(__name__)


def write_reports(result: SyncRunResult, directory: Path) -> list[Path]:
    """Write one CSV per non-empty table and return the written paths."""

    tables: list[tuple[str, Sequence[str], list[Sequence[object]]]] = [
        (
            CHANGES_FILE,
            ("sku", "inventory_item_id", "to"),
            [
                (row.sku, row.item_id, whole_units(row.quantity))
                for row in result.summary.changed
            ],
        ),
        (
            MISSES_FILE,
            ("sku", "mapped_to", "reason"),
            [(miss.feed_sku, miss.mapped_to, miss.reason) for miss in result.missed],
        ),
        (
            AMBIGUOUS_FILE,
            ("normalized_key", "matches", "sample"),
            [(a.normalized_key, a.candidate_count, a.sample_sku) for a in result.ambiguous],
        ),
        (
            ERRORS_FILE,
            ("sku", "inventory_item_id", "code", "message"),
            [
                (
                    error.item.sku if error.item else "",
                    error.item_id or "",
                    error.code or "",
                    error.message,
                )
                for error in result.remaining_errors
            ],
        ),
    ]

    written: list[Path] = []
    for filename, header, rows in tables:
        if not rows:
            continue
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / filename
        with path.open("w", newline="", encoding="utf-8") as handle:
            writer = csv.writer(handle, quoting=csv.QUOTE_ALL)
            writer.writerow(header)
            writer.writerows(rows)
        written.append(path)

    if written:
        log.info("CSV reports written to %s: %s", directory, ", ".join(p.name for p in written))
    return written


def log_summary(summary: RunSummary) -> None:
    log.info(
        "Matched: exact=%s, mapped=%s, normalized=%s, ambiguous=%s, misses=%s",
        summary.matched_exact,
        summary.matched_mapped,
        summary.matched_normalized,
        summary.ambiguous,
        summary.missed,
    )
    log.info(
        "Sync summary: feed_rows=%s, catalog_skus=%s, processed=%s, duplicates=%s, "
        "truncated=%s, updated=%s, errors=%s, activated=%s, location_id=%s, full_sweep=%s",
        summary.feed_rows,
        summary.catalog_skus,
        summary.processed,
        summary.duplicates_collapsed,
        summary.truncated,
        summary.updated,
        summary.errored,
        summary.activated,
        summary.location_id,
        summary.full_sweep,
    )
