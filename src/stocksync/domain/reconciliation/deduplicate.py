"""Deduplication of matched outcomes into write work items.

Responsibilities of this stage:
- collapse matches that target the same catalog item id
- keep the last quantity seen in feed order (last write wins)
- keep the first-seen position of each item id in the output

The bulk write API rejects a request that names the same item twice.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from stocksync.domain.types import Matched, WorkItem

if TYPE_CHECKING:
    from collections.abc import Iterable

    from stocksync.domain.types import ItemId, MatchOutcome


@dataclass(slots=True)
class DeduplicationResult:
    work_items: list[WorkItem] = field(default_factory=list["WorkItem"])
    collapsed: int = 0


def deduplicate_matches(outcomes: Iterable[MatchOutcome]) -> DeduplicationResult:
    """Return one work item per distinct matched item id."""

    by_item: dict[ItemId, WorkItem] = {}
    collapsed = 0
    for outcome in outcomes:
        if not isinstance(outcome, Matched):
            continue
        if outcome.item_id in by_item:
            collapsed += 1
        # Assigning to an existing key keeps its original insertion position.
        by_item[outcome.item_id] = WorkItem(
            sku=outcome.sku,
            item_id=outcome.item_id,
            quantity=outcome.quantity,
        )
    return DeduplicationResult(work_items=list(by_item.values()), collapsed=collapsed)
