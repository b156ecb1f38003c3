"""Feed-to-catalog SKU matching.

Responsibilities of this stage:
- resolve each feed row to at most one catalog item id
- classify every row into exactly one outcome (matched, ambiguous, missed)
- stay pure: no I/O, deterministic for identical inputs

Tiers are tried in order and the first success wins:

1. exact: the feed SKU verbatim in the catalog
2. mapped: the manual map's target SKU verbatim in the catalog
3. normalized: the target SKU's normalized key has a single candidate

Once a manual mapping exists for a feed SKU, the mapped SKU replaces the feed
SKU as the target for tier 3 as well.
"""

from __future__ import annotations

from collections import Counter
from logging import getLogger
from typing import TYPE_CHECKING

from stocksync.domain.types import (
    Ambiguous,
    FeedRow,
    Matched,
    MatchMode,
    MatchOutcome,
    MatchTier,
    Missed,
)

from .normalize import normalize_sku

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from stocksync.domain.types import CatalogIndex, FeedTable, ManualMap

log = getLogger(__name__)


def feed_rows_from_table(table: FeedTable) -> list[FeedRow]:
    """Turn a ``sku -> quantity`` table into rows, keeping the table's order."""

    return [FeedRow(sku=sku, quantity=float(quantity)) for sku, quantity in table.items()]


def match_feed_rows(
    rows: Iterable[FeedRow],
    index: CatalogIndex,
    manual_map: ManualMap | None = None,
    mode: MatchMode = MatchMode.NORMALIZE,
) -> list[MatchOutcome]:
    """Return one outcome per feed row, in feed order."""

    mapping: Mapping[str, str] = manual_map or {}
    outcomes = [match_feed_row(row, index, mapping, mode) for row in rows]
    log.debug("Matched feed rows: %s", dict(Counter(_outcome_label(o) for o in outcomes)))
    return outcomes


def match_feed_row(
    row: FeedRow,
    index: CatalogIndex,
    manual_map: Mapping[str, str],
    mode: MatchMode,
) -> MatchOutcome:
    item_id = index.lookup_exact(row.sku)
    if item_id is not None:
        return _matched(row, row.sku, item_id, MatchTier.EXACT)

    mapped_to = manual_map.get(row.sku) or ""
    target_sku = mapped_to or row.sku
    if mapped_to:
        item_id = index.lookup_exact(mapped_to)
        if item_id is not None:
            return _matched(row, mapped_to, item_id, MatchTier.MAPPED)

    if mode is not MatchMode.EXACT:
        key = normalize_sku(target_sku)
        candidates = index.lookup_normalized(key) if key else ()
        if len(candidates) == 1:
            return _matched(row, target_sku, candidates[0], MatchTier.NORMALIZED)
        if len(candidates) > 1:
            return Ambiguous(
                feed_sku=row.sku,
                normalized_key=key,
                candidate_count=len(candidates),
                sample_sku=target_sku,
            )

    return Missed(feed_sku=row.sku, mapped_to=mapped_to)


def count_by_tier(outcomes: Iterable[MatchOutcome]) -> dict[MatchTier, int]:
    counts = dict.fromkeys(MatchTier, 0)
    for outcome in outcomes:
        if isinstance(outcome, Matched):
            counts[outcome.tier] += 1
    return counts


def _matched(row: FeedRow, sku: str, item_id: str, tier: MatchTier) -> Matched:
    return Matched(
        feed_sku=row.sku,
        sku=sku,
        item_id=item_id,
        quantity=row.quantity,
        tier=tier,
    )


def _outcome_label(outcome: MatchOutcome) -> str:
    match outcome:
        case Matched(tier=tier):
            return f"matched:{tier}"
        case Ambiguous():
            return "ambiguous"
        case Missed():
            return "missed"
