"""Snapshot, remote test, and advance pipeline components."""

from .decide import decide
from .models import Decision, Outcome, RunResult, Snapshot
from .runner import RemoteTestRunner
from .snapshot import SnapshotBuilder

__all__ = [
    "Decision",
    "Outcome",
    "RemoteTestRunner",
    "RunResult",
    "Snapshot",
    "SnapshotBuilder",
    "decide",
]
