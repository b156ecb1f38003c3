"""Run summary aggregation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from stocksync.domain.types import Ambiguous, MatchTier, Missed, RunSummary, SyncRunResult

from .matching import count_by_tier

if TYPE_CHECKING:
    from collections.abc import Sequence

    from stocksync.domain.types import LocationId, MatchOutcome, RecoveryResult, WriteResult


def build_run_summary(
    *,
    outcomes: Sequence[MatchOutcome],
    catalog_skus: int,
    processed: int,
    duplicates_collapsed: int,
    truncated: int,
    write: WriteResult,
    recovery: RecoveryResult,
    location_id: LocationId,
    full_sweep: bool,
) -> RunSummary:
    """Fold stage outputs into the counters handed to reporting."""

    tiers = count_by_tier(outcomes)
    retry = recovery.retry
    updated = write.updated + recovery.additional_updated
    errored = write.errored - recovery.recovered_errors
    changed = list(write.changed)
    if retry is not None:
        errored += retry.errored
        changed.extend(retry.changed)

    return RunSummary(
        feed_rows=len(outcomes),
        catalog_skus=catalog_skus,
        matched_exact=tiers[MatchTier.EXACT],
        matched_mapped=tiers[MatchTier.MAPPED],
        matched_normalized=tiers[MatchTier.NORMALIZED],
        ambiguous=sum(1 for outcome in outcomes if isinstance(outcome, Ambiguous)),
        missed=sum(1 for outcome in outcomes if isinstance(outcome, Missed)),
        duplicates_collapsed=duplicates_collapsed,
        processed=processed,
        truncated=truncated,
        updated=updated,
        errored=max(0, errored),
        activated=len(recovery.activated),
        location_id=location_id,
        full_sweep=full_sweep,
        changed=tuple(changed),
    )


def build_run_result(
    summary: RunSummary,
    *,
    outcomes: Sequence[MatchOutcome],
    recovery: RecoveryResult,
) -> SyncRunResult:
    missed: list[Missed] = []
    ambiguous: list[Ambiguous] = []
    for outcome in outcomes:
        if isinstance(outcome, Missed):
            missed.append(outcome)
        elif isinstance(outcome, Ambiguous):
            ambiguous.append(outcome)
    return SyncRunResult(
        summary=summary,
        missed=tuple(missed),
        ambiguous=tuple(ambiguous),
        remaining_errors=tuple(recovery.remaining_errors),
    )
