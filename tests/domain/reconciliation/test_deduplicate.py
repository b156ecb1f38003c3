from __future__ import annotations

from stocksync.domain.reconciliation.deduplicate import deduplicate_matches
from stocksync.domain.types import Ambiguous, Matched, MatchTier, Missed, WorkItem


def _matched(feed_sku: str, item_id: str, quantity: float) -> Matched:
    return Matched(
        feed_sku=feed_sku,
        sku=feed_sku,
        item_id=item_id,
        quantity=quantity,
        tier=MatchTier.EXACT,
    )


def test_last_quantity_wins_for_duplicate_item() -> None:
    result = deduplicate_matches([_matched("SKU1", "ITEM1", 10), _matched("sku1", "ITEM1", 7)])

    assert result.work_items == [WorkItem(sku="sku1", item_id="ITEM1", quantity=7)]
    assert result.collapsed == 1


def test_first_seen_position_is_kept() -> None:
    result = deduplicate_matches(
        [
            _matched("A", "1", 1),
            _matched("B", "2", 2),
            _matched("a", "1", 3),
            _matched("C", "3", 4),
        ]
    )

    assert [item.item_id for item in result.work_items] == ["1", "2", "3"]
    assert result.work_items[0].quantity == 3


def test_non_matches_are_ignored() -> None:
    result = deduplicate_matches(
        [
            Missed(feed_sku="X"),
            Ambiguous(feed_sku="Y", normalized_key="Y", candidate_count=2, sample_sku="Y"),
            _matched("A", "1", 5),
        ]
    )

    assert result.work_items == [WorkItem(sku="A", item_id="1", quantity=5)]
    assert result.collapsed == 0


def test_item_ids_are_unique() -> None:
    outcomes = [_matched(f"S{n}", str(n % 3), n) for n in range(10)]

    result = deduplicate_matches(outcomes)

    item_ids = [item.item_id for item in result.work_items]
    assert len(item_ids) == len(set(item_ids)) == 3
    assert result.collapsed == 7
