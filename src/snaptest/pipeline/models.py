"""Pipeline data models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

CommitId = str
TreeId = str

INTERRUPTED_EXIT_STATUS = 130


@dataclass(frozen=True)
class Snapshot:
    """A checkpoint commit of the working tree and the head it was built on."""

    commit: CommitId
    tree: TreeId
    parent: CommitId
    parent_tree: TreeId

    @property
    def is_empty(self) -> bool:
        return self.tree == self.parent_tree


@dataclass(frozen=True)
class RunResult:
    """Exit status and wall time of one remote command sequence."""

    exit_status: int
    duration_seconds: float
    interrupted: bool = False

    @property
    def succeeded(self) -> bool:
        return self.exit_status == 0 and not self.interrupted


class Outcome(Enum):
    ADVANCED = "advanced"
    SKIPPED_EMPTY = "skipped-empty"
    SKIPPED_RACE = "skipped-race"
    NOT_ADVANCED = "not-advanced"


@dataclass(frozen=True)
class Decision:
    """Outcome of a run plus the state observed when it was decided."""

    outcome: Outcome
    snapshot: Snapshot
    run_result: RunResult | None
    current_head: CommitId
