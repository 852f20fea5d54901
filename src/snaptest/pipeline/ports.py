"""Typed collaborator ports used by the snapshot pipeline."""

from __future__ import annotations

from typing import Protocol

from .models import CommitId, RunResult, TreeId


class HistoryStore(Protocol):
    """Local version-control operations required by the pipeline."""

    def current_head(self) -> CommitId: ...

    def write_tree(self) -> TreeId: ...

    def create_commit(self, tree: TreeId, parent: CommitId, message: str) -> CommitId: ...

    def tree_of(self, commit: CommitId) -> TreeId: ...

    def advance_head(self, commit: CommitId, *, expected: CommitId) -> bool: ...

    def format_changes(self) -> list[str]: ...


class RemoteExecutor(Protocol):
    """Remote transfer and execution operations required by the pipeline."""

    def transfer(self, commit: CommitId, remote_name: str) -> None: ...

    def execute(self, command: str) -> RunResult: ...
