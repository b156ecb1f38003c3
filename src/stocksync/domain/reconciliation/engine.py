"""Reconciliation run entry point.

Stages run strictly in sequence, each consuming the complete output of the
previous one:

1) build the catalog index from the listing port
2) match feed rows against the index
3) deduplicate matches into work items
4) cap the work list unless a full sweep was requested
5) bulk-write quantities
6) activate unstocked items and retry them once
7) aggregate the run summary

Only stages 5 and 6 mutate remote state.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from stocksync.domain.types import MatchMode

from .bulk_write import WritePolicy, write_quantities
from .catalog_index import DEFAULT_PAGE_DELAY_SECONDS, build_catalog_index
from .deduplicate import deduplicate_matches
from .matching import feed_rows_from_table, match_feed_rows
from .recovery import recover_unstocked_items
from .report import build_run_result, build_run_summary

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from stocksync.domain.ports import (
        CatalogListingSource,
        InventoryQuantityWriter,
        LocationActivator,
    )
    from stocksync.domain.types import (
        FeedTable,
        LocationId,
        ManualMap,
        SyncRunResult,
        WorkItem,
    )

DEFAULT_MAX_ITEMS = 1500

log = getLogger(__name__)


@dataclass(slots=True, frozen=True, kw_only=True)
class ReconcileOptions:
    """Immutable knobs for one reconciliation run.

    When ``full_sweep`` is false the deduplicated work list is cut to its
    first ``max_items`` entries, in feed order.
    """

    mode: MatchMode = MatchMode.NORMALIZE
    full_sweep: bool = True
    max_items: int = DEFAULT_MAX_ITEMS
    page_delay: float = DEFAULT_PAGE_DELAY_SECONDS
    write: WritePolicy = field(default_factory=WritePolicy)

    def __post_init__(self) -> None:
        if self.max_items < 0:
            raise ValueError("max_items must be non-negative")


def select_work_items(
    items: Sequence[WorkItem],
    *,
    full_sweep: bool,
    max_items: int,
) -> tuple[list[WorkItem], int]:
    """Return the items to process this run and how many were cut off."""

    if full_sweep:
        return list(items), 0
    selected = list(items[:max_items])
    return selected, len(items) - len(selected)


def reconcile_inventory(
    feed: FeedTable,
    *,
    catalog: CatalogListingSource,
    writer: InventoryQuantityWriter,
    activator: LocationActivator,
    location_id: LocationId,
    manual_map: ManualMap | None = None,
    options: ReconcileOptions | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> SyncRunResult:
    """Reconcile ``feed`` against the catalog and push corrected quantities."""

    active = options or ReconcileOptions()

    index = build_catalog_index(catalog, page_delay=active.page_delay, sleep=sleep)

    rows = feed_rows_from_table(feed)
    outcomes = match_feed_rows(rows, index, manual_map, active.mode)
    deduplicated = deduplicate_matches(outcomes)
    work, truncated = select_work_items(
        deduplicated.work_items,
        full_sweep=active.full_sweep,
        max_items=active.max_items,
    )
    if truncated:
        log.warning(
            "Full sweep disabled: processing first %s of %s work items",
            len(work),
            len(work) + truncated,
        )
    log.info(
        "Processing this run: %s work item(s) (chunk_size=%s, mode=%s)",
        len(work),
        active.write.chunk_size,
        active.mode,
    )

    write = write_quantities(
        work,
        writer=writer,
        location_id=location_id,
        policy=active.write,
        sleep=sleep,
    )
    recovery = recover_unstocked_items(
        write.row_errors,
        work,
        writer=writer,
        activator=activator,
        location_id=location_id,
        policy=active.write,
        sleep=sleep,
    )

    summary = build_run_summary(
        outcomes=outcomes,
        catalog_skus=len(index.exact_by_sku),
        processed=len(work),
        duplicates_collapsed=deduplicated.collapsed,
        truncated=truncated,
        write=write,
        recovery=recovery,
        location_id=location_id,
        full_sweep=active.full_sweep,
    )
    return build_run_result(summary, outcomes=outcomes, recovery=recovery)
