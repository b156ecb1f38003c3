"""Value types shared by the reconciliation stages."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from collections.abc import Mapping

# Plain aliases so signatures read in domain terms.
type Sku = str
type ItemId = str
type LocationId = str
type FeedTable = Mapping[Sku, float]
type ManualMap = Mapping[Sku, Sku]

NOT_IN_CATALOG = "not_in_catalog"


def whole_units(quantity: float) -> int:
    """Integer quantity written to the store for a feed value; halves round up."""

    return math.floor(quantity + 0.5)


class MatchTier(StrEnum):
    """Which lookup resolved a feed SKU to a catalog item."""

    EXACT = "exact"
    MAPPED = "mapped"
    NORMALIZED = "normalized"


class MatchMode(StrEnum):
    """Matching strategy; ``EXACT`` disables the normalized tier."""

    EXACT = "exact"
    NORMALIZE = "normalize"

    @classmethod
    def parse(cls, value: str) -> MatchMode:
        normalized = value.strip().lower()
        if normalized == "prefer-exact":
            return cls.NORMALIZE
        try:
            return cls(normalized)
        except ValueError as exc:
            raise ValueError(f"Unsupported SKU match mode: {value}") from exc


class OutcomeStatus(StrEnum):
    MATCHED = "matched"
    AMBIGUOUS = "ambiguous"
    MISSED = "missed"


@dataclass(slots=True, frozen=True)
class FeedRow:
    """One feed line: a SKU and the quantity the feed reports for it."""

    sku: Sku
    quantity: float


@dataclass(slots=True, frozen=True)
class CatalogRecord:
    sku: Sku
    item_id: ItemId


@dataclass(slots=True, kw_only=True)
class CatalogIndex:
    """Lookup maps over every catalog record seen during one run.

    ``exact_by_sku`` keeps the last item id seen for a verbatim SKU.
    ``item_ids_by_normalized_sku`` accumulates every item id in the order the
    catalog listed them, so a normalized key can resolve to several items.
    """

    exact_by_sku: dict[Sku, ItemId] = field(default_factory=dict["Sku", "ItemId"])
    item_ids_by_normalized_sku: dict[str, list[ItemId]] = field(
        default_factory=dict["str", "list[ItemId]"]
    )
    records_seen: int = 0
    records_skipped: int = 0

    def lookup_exact(self, sku: Sku) -> ItemId | None:
        return self.exact_by_sku.get(sku)

    def lookup_normalized(self, key: str) -> tuple[ItemId, ...]:
        return tuple(self.item_ids_by_normalized_sku.get(key, ()))


@dataclass(slots=True, frozen=True, kw_only=True)
class Matched:
    """Feed row resolved to exactly one catalog item."""

    feed_sku: Sku
    sku: Sku
    item_id: ItemId
    quantity: float
    tier: MatchTier
    status: Literal[OutcomeStatus.MATCHED] = OutcomeStatus.MATCHED


@dataclass(slots=True, frozen=True, kw_only=True)
class Ambiguous:
    """Normalized key hit several catalog items; never written."""

    feed_sku: Sku
    normalized_key: str
    candidate_count: int
    sample_sku: Sku
    status: Literal[OutcomeStatus.AMBIGUOUS] = OutcomeStatus.AMBIGUOUS

    def __post_init__(self) -> None:
        if self.candidate_count < 2:
            raise ValueError("Ambiguous outcome needs at least two candidates")


@dataclass(slots=True, frozen=True, kw_only=True)
class Missed:
    feed_sku: Sku
    mapped_to: Sku = ""
    reason: str = NOT_IN_CATALOG
    status: Literal[OutcomeStatus.MISSED] = OutcomeStatus.MISSED


type MatchOutcome = Matched | Ambiguous | Missed


@dataclass(slots=True, frozen=True)
class WorkItem:
    """Deduplicated quantity write for one catalog item."""

    sku: Sku
    item_id: ItemId
    quantity: float


@dataclass(slots=True, frozen=True)
class ChangedRow:
    sku: Sku
    item_id: ItemId
    quantity: float

    @classmethod
    def from_item(cls, item: WorkItem) -> ChangedRow:
        return cls(sku=item.sku, item_id=item.item_id, quantity=item.quantity)


@dataclass(slots=True, frozen=True, kw_only=True)
class RowError:
    """A per-row rejection reported inside an otherwise successful bulk call.

    ``item`` is ``None`` when the error did not name a row index that falls
    inside the chunk it came from.
    """

    item: WorkItem | None
    message: str
    code: str | None = None
    index: int | None = None

    @property
    def item_id(self) -> ItemId | None:
        return self.item.item_id if self.item is not None else None


@dataclass(slots=True, frozen=True)
class ChunkResult:
    attempted: tuple[WorkItem, ...]
    row_errors: tuple[RowError, ...] = ()


@dataclass(slots=True, kw_only=True)
class WriteResult:
    """Accumulated outcome of one bulk-write pass over a work list."""

    updated: int = 0
    errored: int = 0
    chunks: int = 0
    row_errors: list[RowError] = field(default_factory=list["RowError"])
    failed_items: list[WorkItem] = field(default_factory=list["WorkItem"])
    changed: list[ChangedRow] = field(default_factory=list["ChangedRow"])


@dataclass(slots=True, kw_only=True)
class RecoveryResult:
    """Outcome of activating unstocked items and retrying their writes."""

    candidates: tuple[ItemId, ...] = ()
    activated: tuple[ItemId, ...] = ()
    activation_failures: dict[ItemId, str] = field(default_factory=dict["ItemId", "str"])
    retry: WriteResult | None = None
    recovered_errors: int = 0
    remaining_errors: list[RowError] = field(default_factory=list["RowError"])

    @property
    def additional_updated(self) -> int:
        return self.retry.updated if self.retry is not None else 0


@dataclass(slots=True, frozen=True, kw_only=True)
class RunSummary:
    """Aggregate counters for one sync run plus the rows that changed."""

    feed_rows: int
    catalog_skus: int
    matched_exact: int
    matched_mapped: int
    matched_normalized: int
    ambiguous: int
    missed: int
    duplicates_collapsed: int
    processed: int
    truncated: int
    updated: int
    errored: int
    activated: int
    location_id: LocationId
    full_sweep: bool
    changed: tuple[ChangedRow, ...] = ()

    @property
    def matched(self) -> int:
        return self.matched_exact + self.matched_mapped + self.matched_normalized


@dataclass(slots=True, frozen=True, kw_only=True)
class SyncRunResult:
    summary: RunSummary
    missed: tuple[Missed, ...] = ()
    ambiguous: tuple[Ambiguous, ...] = ()
    remaining_errors: tuple[RowError, ...] = ()
