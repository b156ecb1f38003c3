from __future__ import annotations

import csv
from typing import TYPE_CHECKING

from stocksync.adapters.reports import (
    AMBIGUOUS_FILE,
    CHANGES_FILE,
    ERRORS_FILE,
    MISSES_FILE,
    write_reports,
)
from stocksync.domain.types import (
    Ambiguous,
    ChangedRow,
    Missed,
    RowError,
    RunSummary,
    SyncRunResult,
    WorkItem,
)

if TYPE_CHECKING:
    from pathlib import Path


def _summary(changed: tuple[ChangedRow, ...] = ()) -> RunSummary:
    return RunSummary(
        feed_rows=3,
        catalog_skus=2,
        matched_exact=1,
        matched_mapped=0,
        matched_normalized=0,
        ambiguous=1,
        missed=1,
        duplicates_collapsed=0,
        processed=1,
        truncated=0,
        updated=len(changed),
        errored=0,
        activated=0,
        location_id="9",
        full_sweep=True,
        changed=changed,
    )


def _read(path: Path) -> list[list[str]]:
    with path.open(newline="", encoding="utf-8") as handle:
        return list(csv.reader(handle))


def test_write_reports_writes_each_table(tmp_path: Path) -> None:
    item = WorkItem("B-2", "22", 1)
    result = SyncRunResult(
        summary=_summary((ChangedRow("A-1", "11", 5.0), ChangedRow("C,3", "33", 2.5))),
        missed=(Missed(feed_sku="X", mapped_to="Y"),),
        ambiguous=(
            Ambiguous(feed_sku="ab1", normalized_key="AB1", candidate_count=2, sample_sku="ab1"),
        ),
        remaining_errors=(RowError(item=item, message="Invalid", code="INVALID", index=0),),
    )
    out = tmp_path / "out"

    written = write_reports(result, out)

    assert [path.name for path in written] == [
        CHANGES_FILE,
        MISSES_FILE,
        AMBIGUOUS_FILE,
        ERRORS_FILE,
    ]
    assert _read(out / CHANGES_FILE) == [
        ["sku", "inventory_item_id", "to"],
        ["A-1", "11", "5"],
        ["C,3", "33", "3"],
    ]
    assert _read(out / MISSES_FILE) == [
        ["sku", "mapped_to", "reason"],
        ["X", "Y", "not_in_catalog"],
    ]
    assert _read(out / AMBIGUOUS_FILE) == [
        ["normalized_key", "matches", "sample"],
        ["AB1", "2", "ab1"],
    ]
    assert _read(out / ERRORS_FILE) == [
        ["sku", "inventory_item_id", "code", "message"],
        ["B-2", "22", "INVALID", "Invalid"],
    ]
    assert (out / CHANGES_FILE).read_text(encoding="utf-8").startswith('"sku"')


def test_write_reports_skips_empty_tables(tmp_path: Path) -> None:
    out = tmp_path / "out"

    written = write_reports(SyncRunResult(summary=_summary()), out)

    assert written == []
    assert not out.exists()
