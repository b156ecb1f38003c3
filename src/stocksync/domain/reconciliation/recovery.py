"""Activation recovery for items not stocked at the sync location.

Responsibilities of this stage:
- classify row errors that mean "item is not stocked at this location"
- stock each affected item at the location once
- retry the bulk write once, scoped to the items that were stocked

The pass never re-enters itself: errors raised by the retry are final.
"""

from __future__ import annotations

import re
import time
from logging import getLogger
from typing import TYPE_CHECKING

from stocksync.domain.errors import ActivationError, ProtocolError, TransportError
from stocksync.domain.ports import ActivationStatus
from stocksync.domain.types import RecoveryResult

from .bulk_write import WritePolicy, write_quantities

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from stocksync.domain.ports import InventoryQuantityWriter, LocationActivator
    from stocksync.domain.types import ItemId, LocationId, RowError, WorkItem

NOT_STOCKED_ERROR_CODES = frozenset({"ITEM_NOT_STOCKED_AT_LOCATION"})
NOT_STOCKED_MESSAGE_PATTERN = re.compile(
    r"not\s+(?:stocked|active|activated)\s+at\s+(?:the|this)\s+location",
    re.IGNORECASE,
)

log = getLogger(__name__)


def is_not_stocked_error(error: RowError) -> bool:
    """Return whether ``error`` means the item is not stocked at the location.

    Matches on the user error code ``ITEM_NOT_STOCKED_AT_LOCATION`` first and
    falls back to the message wording ("not stocked at the location", "not
    active at this location", ...). Errors that cannot be attributed to a work
    item never qualify, since there is nothing to activate.
    """

    if error.item is None:
        return False
    if error.code is not None and error.code.upper() in NOT_STOCKED_ERROR_CODES:
        return True
    return NOT_STOCKED_MESSAGE_PATTERN.search(error.message) is not None


def unstocked_item_ids(errors: Iterable[RowError]) -> tuple[ItemId, ...]:
    """Distinct item ids named by not-stocked errors, in first-seen order."""

    seen: dict[ItemId, None] = {}
    for error in errors:
        if error.item is not None and is_not_stocked_error(error):
            seen.setdefault(error.item.item_id, None)
    return tuple(seen)


def recover_unstocked_items(
    row_errors: Sequence[RowError],
    items: Sequence[WorkItem],
    *,
    writer: InventoryQuantityWriter,
    activator: LocationActivator,
    location_id: LocationId,
    policy: WritePolicy | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> RecoveryResult:
    """Activate unstocked items at ``location_id`` and retry their writes once."""

    candidates = unstocked_item_ids(row_errors)
    if not candidates:
        return RecoveryResult(remaining_errors=list(row_errors))

    log.info("Activating %s item(s) not stocked at location %s", len(candidates), location_id)
    activated: list[ItemId] = []
    failures: dict[ItemId, str] = {}
    for item_id in candidates:
        try:
            status = activator.activate(item_id, location_id)
        except (ActivationError, TransportError, ProtocolError) as exc:
            log.warning("Activation failed for item %s: %s", item_id, exc)
            failures[item_id] = str(exc)
            continue
        if status is ActivationStatus.ALREADY_ACTIVE:
            log.debug("Item %s already stocked at location %s", item_id, location_id)
        activated.append(item_id)

    activated_ids = set(activated)
    retry_items = [item for item in items if item.item_id in activated_ids]
    retry = None
    if retry_items:
        retry = write_quantities(
            retry_items,
            writer=writer,
            location_id=location_id,
            policy=policy,
            sleep=sleep,
        )

    kept = [error for error in row_errors if error.item_id not in activated_ids]
    recovered = len(row_errors) - len(kept)
    remaining = kept + (retry.row_errors if retry is not None else [])

    log.info(
        "Activation recovery: candidates=%s, activated=%s, failed=%s, retried=%s, updated=%s",
        len(candidates),
        len(activated),
        len(failures),
        len(retry_items),
        retry.updated if retry is not None else 0,
    )
    return RecoveryResult(
        candidates=candidates,
        activated=tuple(activated),
        activation_failures=failures,
        retry=retry,
        recovered_errors=recovered,
        remaining_errors=remaining,
    )
