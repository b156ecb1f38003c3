"""Reconciliation core: feed-to-catalog matching and resilient bulk writes.

Layered flow:
1) index the catalog (exact and normalized SKU maps)
2) match feed rows through the exact, mapped and normalized tiers
3) deduplicate matches by catalog item id
4) write quantities in chunks
5) activate items missing at the location and retry them once
6) aggregate the run summary
"""

from __future__ import annotations

from .bulk_write import WritePolicy, write_quantities
from .catalog_index import build_catalog_index
from .deduplicate import DeduplicationResult, deduplicate_matches
from .engine import ReconcileOptions, reconcile_inventory, select_work_items
from .matching import match_feed_rows
from .normalize import normalize_sku
from .recovery import is_not_stocked_error, recover_unstocked_items
from .report import build_run_summary

__all__ = [
    "DeduplicationResult",
    "ReconcileOptions",
    "WritePolicy",
    "build_catalog_index",
    "build_run_summary",
    "deduplicate_matches",
    "is_not_stocked_error",
    "match_feed_rows",
    "normalize_sku",
    "reconcile_inventory",
    "recover_unstocked_items",
    "select_work_items",
    "write_quantities",
]
