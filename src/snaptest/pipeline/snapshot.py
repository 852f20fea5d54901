"""Capture the local working tree as a snapshot commit."""

from __future__ import annotations

from .. import exec as exec_util
from .. import log
from ..git import short_id
from ..services.errors import DependencyMissingError, SnapshotFailedError
from .models import Snapshot
from .ports import HistoryStore


class SnapshotBuilder:
    """Build a checkpoint commit on top of the current HEAD.

    The commit is written to the object store only; HEAD is not moved.
    """

    def __init__(self, store: HistoryStore, *, message: str) -> None:
        self._store = store
        self._message = message

    def build(self, *, format_changes: bool = True) -> Snapshot:
        try:
            if format_changes:
                self._store.format_changes()
            parent = self._store.current_head()
            parent_tree = self._store.tree_of(parent)
            tree = self._store.write_tree()
            commit = self._store.create_commit(tree, parent, self._message)
        except exec_util.CommandExecutionError as exc:
            if exc.missing:
                raise DependencyMissingError(str(exc)) from exc
            raise SnapshotFailedError(
                f"cannot snapshot working tree: {exc}",
                recovery_hint="check that the repository has at least one commit",
            ) from exc
        except exec_util.CommandParseError as exc:
            raise SnapshotFailedError(f"cannot snapshot working tree: {exc}") from exc
        snapshot = Snapshot(commit=commit, tree=tree, parent=parent, parent_tree=parent_tree)
        log.info(f"snapshot {short_id(commit)} on {short_id(parent)}")
        return snapshot
