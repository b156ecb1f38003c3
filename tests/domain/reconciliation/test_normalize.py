from __future__ import annotations

import pytest

from stocksync.domain.reconciliation.normalize import normalize_sku


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("ab-12", "AB12"),
        ("AB12", "AB12"),
        ("Ab_12", "AB12"),
        (" x.y/z 9 ", "XYZ9"),
        ("---", ""),
        ("", ""),
        (None, ""),
    ],
)
def test_normalize_sku(raw: str | None, expected: str) -> None:
    assert normalize_sku(raw) == expected


def test_normalize_sku_is_idempotent() -> None:
    once = normalize_sku("sku-001/b")

    assert normalize_sku(once) == once


def test_normalize_sku_drops_non_ascii_letters() -> None:
    assert normalize_sku("straße-1") == "STRASSE1"
    assert normalize_sku("é1") == "1"
