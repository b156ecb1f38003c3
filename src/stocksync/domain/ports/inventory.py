"""Ports for mutating inventory quantities at a location."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from stocksync.domain.types import ItemId, LocationId

AVAILABLE_QUANTITY = "available"
CORRECTION_REASON = "correction"


@dataclass(slots=True, frozen=True)
class QuantityChange:
    item_id: ItemId
    location_id: LocationId
    quantity: float


@dataclass(slots=True, frozen=True, kw_only=True)
class QuantityUpdate:
    """Input of one bulk set-quantity call.

    ``ignore_compare_quantity`` makes the write an unconditional overwrite
    instead of a compare-and-swap against the current quantity.
    """

    changes: tuple[QuantityChange, ...]
    reference_document_uri: str
    name: str = AVAILABLE_QUANTITY
    reason: str = CORRECTION_REASON
    ignore_compare_quantity: bool = True


@dataclass(slots=True, frozen=True, kw_only=True)
class InventoryUserError:
    """Business-level rejection returned inside a successful bulk call.

    ``field`` is the input path the catalog blamed, e.g.
    ``("input", "quantities", "2", "locationId")``.
    """

    message: str
    field: tuple[str, ...] = ()
    code: str | None = None


class ActivationStatus(StrEnum):
    ACTIVATED = "activated"
    ALREADY_ACTIVE = "already_active"


@runtime_checkable
class InventoryQuantityWriter(Protocol):
    """Bulk "set quantity" call; returns user errors, empty on full success."""

    def set_quantities(self, update: QuantityUpdate) -> list[InventoryUserError]: ...


@runtime_checkable
class LocationActivator(Protocol):
    """Stock an item at a location.

    Implementations raise ``ActivationError`` for a hard refusal.
    """

    def activate(self, item_id: ItemId, location_id: LocationId) -> ActivationStatus: ...


__all__ = [
    "AVAILABLE_QUANTITY",
    "CORRECTION_REASON",
    "ActivationStatus",
    "InventoryQuantityWriter",
    "InventoryUserError",
    "LocationActivator",
    "QuantityChange",
    "QuantityUpdate",
]
