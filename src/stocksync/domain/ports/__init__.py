"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import CatalogEntry, CatalogListingSource, CatalogPage
from .inventory import (
    ActivationStatus,
    InventoryQuantityWriter,
    InventoryUserError,
    LocationActivator,
    QuantityChange,
    QuantityUpdate,
)

__all__ = [
    "ActivationStatus",
    "CatalogEntry",
    "CatalogListingSource",
    "CatalogPage",
    "InventoryQuantityWriter",
    "InventoryUserError",
    "LocationActivator",
    "QuantityChange",
    "QuantityUpdate",
]
