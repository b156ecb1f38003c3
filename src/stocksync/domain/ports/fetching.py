"""Ports for listing the catalog's stock-keeping records."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from stocksync.domain.types import ItemId


@dataclass(slots=True, frozen=True)
class CatalogEntry:
    """One listed stock-keeping record as the catalog reported it.

    ``item_id`` is ``None`` when the adapter could not parse the catalog's
    identifier; such entries are skipped by the index builder.
    """

    sku: str | None
    item_id: ItemId | None


@dataclass(slots=True)
class CatalogPage:
    """One page of catalog entries plus the cursor for the next page."""

    entries: list[CatalogEntry] = field(default_factory=list["CatalogEntry"])
    has_next_page: bool = False
    end_cursor: str | None = None


@runtime_checkable
class CatalogListingSource(Protocol):
    """Paged listing of catalog records; cursors are passed back verbatim."""

    def fetch_page(self, cursor: str | None) -> CatalogPage: ...


__all__ = ["CatalogEntry", "CatalogListingSource", "CatalogPage"]
