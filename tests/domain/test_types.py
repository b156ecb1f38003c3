from __future__ import annotations

import pytest

from stocksync.domain.types import (
    Ambiguous,
    ChangedRow,
    MatchMode,
    RecoveryResult,
    RowError,
    WorkItem,
    WriteResult,
    whole_units,
)


def test_ambiguous_requires_several_candidates() -> None:
    with pytest.raises(ValueError, match="at least two"):
        Ambiguous(feed_sku="A", normalized_key="A", candidate_count=1, sample_sku="A")


def test_match_mode_rejects_unknown_value() -> None:
    with pytest.raises(ValueError, match="Unsupported SKU match mode"):
        MatchMode.parse("fuzzy")


def test_row_error_item_id() -> None:
    item = WorkItem("A", "1", 2)

    assert RowError(item=item, message="x").item_id == "1"
    assert RowError(item=None, message="x").item_id is None


def test_changed_row_from_item() -> None:
    assert ChangedRow.from_item(WorkItem("A", "1", 2)) == ChangedRow("A", "1", 2)


def test_recovery_additional_updated() -> None:
    assert RecoveryResult().additional_updated == 0
    assert RecoveryResult(retry=WriteResult(updated=3)).additional_updated == 3


@pytest.mark.parametrize(
    ("quantity", "expected"),
    [(0.0, 0), (2.4, 2), (2.5, 3), (3.5, 4), (7.0, 7)],
)
def test_whole_units_rounds_halves_up(quantity: float, expected: int) -> None:
    assert whole_units(quantity) == expected
