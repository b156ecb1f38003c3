"""Chunked bulk quantity writes.

Responsibilities of this stage:
- split work items into consecutive chunks of at most ``chunk_size``
- issue one bulk set-quantity call per chunk, strictly in order
- absorb call-level failures (whole chunk errored, no retry)
- attribute row-level user errors to the work items they name

The write API only reports failures. A row counts as updated when no user
error names its index.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from stocksync.domain.errors import ProtocolError, TransportError
from stocksync.domain.ports import QuantityChange, QuantityUpdate
from stocksync.domain.types import ChangedRow, ChunkResult, RowError, WriteResult

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Sequence

    from stocksync.domain.ports import InventoryQuantityWriter, InventoryUserError
    from stocksync.domain.types import LocationId, WorkItem

DEFAULT_CHUNK_SIZE = 100
DEFAULT_CHUNK_DELAY_SECONDS = 0.15
DEFAULT_FAILURE_BACKOFF_SECONDS = 0.8
DEFAULT_REFERENCE_DOCUMENT_URI = "stocksync://feed/sync"
_ERROR_SAMPLE_SIZE = 5

log = getLogger(__name__)


@dataclass(slots=True, frozen=True, kw_only=True)
class WritePolicy:
    """Chunking and pacing shared by the initial pass and the recovery retry."""

    chunk_size: int = DEFAULT_CHUNK_SIZE
    reference_document_uri: str = DEFAULT_REFERENCE_DOCUMENT_URI
    chunk_delay: float = DEFAULT_CHUNK_DELAY_SECONDS
    failure_backoff: float = DEFAULT_FAILURE_BACKOFF_SECONDS

    def __post_init__(self) -> None:
        if self.chunk_size < 1:
            raise ValueError("Chunk size must be at least 1")


def iter_chunks(items: Sequence[WorkItem], chunk_size: int) -> Iterator[tuple[WorkItem, ...]]:
    if chunk_size < 1:
        raise ValueError("Chunk size must be at least 1")
    for start in range(0, len(items), chunk_size):
        yield tuple(items[start : start + chunk_size])


def write_quantities(
    items: Sequence[WorkItem],
    *,
    writer: InventoryQuantityWriter,
    location_id: LocationId,
    policy: WritePolicy | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> WriteResult:
    """Write every item's quantity at ``location_id`` and tally the outcome."""

    active_policy = policy or WritePolicy()
    result = WriteResult()

    offset = 0
    for chunk in iter_chunks(items, active_policy.chunk_size):
        result.chunks += 1
        update = _build_update(chunk, location_id, active_policy.reference_document_uri)
        try:
            user_errors = writer.set_quantities(update)
        except (TransportError, ProtocolError) as exc:
            log.error(
                "Bulk write failed for rows %s-%s: %s",
                offset,
                offset + len(chunk) - 1,
                exc,
            )
            result.errored += len(chunk)
            result.failed_items.extend(chunk)
            sleep(active_policy.failure_backoff)
        else:
            chunk_result = attribute_user_errors(chunk, user_errors)
            _accumulate(result, chunk_result)
            sleep(active_policy.chunk_delay)
        offset += len(chunk)

    log.info(
        "Bulk write finished: items=%s, chunks=%s, updated=%s, errored=%s",
        len(items),
        result.chunks,
        result.updated,
        result.errored,
    )
    return result


def attribute_user_errors(
    chunk: Sequence[WorkItem],
    user_errors: Sequence[InventoryUserError],
) -> ChunkResult:
    """Pair each user error with the chunk row its ``field`` path names."""

    row_errors: list[RowError] = []
    for error in user_errors:
        index = row_index(error.field)
        item = chunk[index] if index is not None and index < len(chunk) else None
        row_errors.append(
            RowError(
                item=item,
                message=error.message,
                code=error.code,
                index=index if item is not None else None,
            )
        )
    if row_errors:
        sample = [(e.index, e.code, e.message) for e in row_errors[:_ERROR_SAMPLE_SIZE]]
        log.warning("Bulk write returned %s user error(s); sample: %s", len(row_errors), sample)
    return ChunkResult(attempted=tuple(chunk), row_errors=tuple(row_errors))


def row_index(field_path: Sequence[str]) -> int | None:
    """Return the row index in a ``("input", "quantities", "<i>", ...)`` path."""

    for position, part in enumerate(field_path[:-1]):
        if part == "quantities":
            candidate = field_path[position + 1]
            if candidate.isdigit():
                return int(candidate)
    return None


def _accumulate(result: WriteResult, chunk_result: ChunkResult) -> None:
    attempted = chunk_result.attempted
    errors = chunk_result.row_errors
    updated = max(0, len(attempted) - len(errors))
    result.updated += updated
    result.errored += len(errors)
    result.row_errors.extend(errors)

    flagged = {error.index for error in errors if error.index is not None}
    unflagged = [item for position, item in enumerate(attempted) if position not in flagged]
    # Errors without a row index cannot be placed; credit only ``updated`` rows.
    result.changed.extend(ChangedRow.from_item(item) for item in unflagged[:updated])


def _build_update(
    chunk: Sequence[WorkItem],
    location_id: LocationId,
    reference_document_uri: str,
) -> QuantityUpdate:
    return QuantityUpdate(
        changes=tuple(
            QuantityChange(item_id=item.item_id, location_id=location_id, quantity=item.quantity)
            for item in chunk
        ),
        reference_document_uri=reference_document_uri,
    )
