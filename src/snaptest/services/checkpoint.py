"""Snapshot, remote test, and conditional advance as one service call."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .. import exec as exec_util
from ..git import GitHistoryStore
from ..models import SnaptestConfig
from ..notify import Notifier
from ..pipeline.decide import decide
from ..pipeline.models import Decision, RunResult, Snapshot
from ..pipeline.ports import HistoryStore
from ..pipeline.runner import RemoteTestRunner
from ..pipeline.snapshot import SnapshotBuilder
from ..remote import SshRemoteExecutor
from .base import BaseService
from .errors import HistoryFailedError, ServiceFailure


@dataclass(frozen=True)
class CheckpointRequest:
    format_changes: bool = True


@dataclass(frozen=True)
class CheckpointOutcome:
    decision: Decision
    exit_code: int


class CheckpointService(BaseService[CheckpointRequest, CheckpointOutcome]):
    """Run one snapshot through the remote test loop.

    An empty snapshot short-circuits before any remote contact. Fatal
    failures play the failure cue and are re-raised to the caller.
    """

    def __init__(
        self,
        store: HistoryStore,
        builder: SnapshotBuilder,
        runner: RemoteTestRunner,
        notifier: Notifier,
    ) -> None:
        self._store = store
        self._builder = builder
        self._runner = runner
        self._notifier = notifier

    @classmethod
    def from_config(
        cls,
        config: SnaptestConfig,
        repo_dir: Path,
        *,
        command_runner: exec_util.CommandRunner | None = None,
    ) -> CheckpointService:
        """Wire the git, ssh, and notifier adapters for ``repo_dir``."""
        store = GitHistoryStore(
            repo_dir,
            git_path=config.git_path,
            format_command=config.format_command,
            format_suffixes=config.format_suffixes,
            runner=command_runner,
        )
        executor = SshRemoteExecutor(
            repo_dir,
            config.remote_host,
            config.remote_path,
            git_path=config.git_path,
            ssh_command=config.ssh_command,
            runner=command_runner,
        )
        notifier = Notifier(
            success_sound=config.success_sound,
            failure_sound=config.failure_sound,
            runner=command_runner,
        )
        return cls(
            store=store,
            builder=SnapshotBuilder(store, message=config.commit_message),
            runner=RemoteTestRunner(executor, config),
            notifier=notifier,
        )

    def _run(self, request: CheckpointRequest) -> CheckpointOutcome:
        snapshot = self._builder.build(format_changes=request.format_changes)
        run_result = None if snapshot.is_empty else self._runner.run(snapshot)
        decision = self._decide(snapshot, run_result)
        exit_code = self._notifier.notify(decision)
        return CheckpointOutcome(decision=decision, exit_code=exit_code)

    def _decide(self, snapshot: Snapshot, run_result: RunResult | None) -> Decision:
        try:
            return decide(snapshot, run_result, self._store)
        except (exec_util.CommandExecutionError, exec_util.CommandParseError) as exc:
            raise HistoryFailedError(
                f"cannot update HEAD after the remote run: {exc}",
                recovery_hint=f"the tested snapshot is {snapshot.commit}",
            ) from exc

    def _handle_failure(self, error: ServiceFailure) -> CheckpointOutcome:
        self._notifier.fatal(str(error))
        raise error
