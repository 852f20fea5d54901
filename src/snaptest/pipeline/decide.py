"""Race-safe decision on whether to advance HEAD to a tested snapshot."""

from __future__ import annotations

from .models import Decision, Outcome, RunResult, Snapshot
from .ports import HistoryStore


def decide(snapshot: Snapshot, run_result: RunResult | None, store: HistoryStore) -> Decision:
    """Advance HEAD to ``snapshot`` only when that cannot discard local work.

    HEAD moves only for a non-empty snapshot whose run succeeded while HEAD
    still equals the snapshot's parent. No lock is held during the remote run;
    the comparison here, and the compare-and-swap inside ``advance_head``,
    detect a HEAD that moved in the meantime.
    """
    if snapshot.is_empty:
        return Decision(Outcome.SKIPPED_EMPTY, snapshot, run_result, store.current_head())
    if run_result is None or not run_result.succeeded:
        return Decision(Outcome.NOT_ADVANCED, snapshot, run_result, store.current_head())
    head = store.current_head()
    if head != snapshot.parent:
        return Decision(Outcome.SKIPPED_RACE, snapshot, run_result, head)
    if not store.advance_head(snapshot.commit, expected=snapshot.parent):
        return Decision(Outcome.SKIPPED_RACE, snapshot, run_result, store.current_head())
    return Decision(Outcome.ADVANCED, snapshot, run_result, snapshot.commit)
