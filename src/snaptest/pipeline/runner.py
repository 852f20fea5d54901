"""Run the remote build and test sequence for a snapshot."""

from __future__ import annotations

from .. import exec as exec_util
from .. import log
from ..git import short_id
from ..models import SnaptestConfig
from ..remote_plan import RemotePlan, build_plan, remote_name_for
from ..services.errors import DependencyMissingError, TransferFailedError
from .models import RunResult, Snapshot
from .ports import RemoteExecutor


class RemoteTestRunner:
    """Transfer a snapshot, run the remote plan, and report its result.

    Every non-zero exit status counts as a failed run; the runner does not
    distinguish checkout, eviction, build, or test failures.
    """

    def __init__(self, executor: RemoteExecutor, config: SnaptestConfig) -> None:
        self._executor = executor
        self._config = config

    def plan_for(self, snapshot: Snapshot) -> RemotePlan:
        return build_plan(self._config, remote_name_for(snapshot.commit))

    def run(self, snapshot: Snapshot) -> RunResult:
        remote_name = remote_name_for(snapshot.commit)
        try:
            self._executor.transfer(snapshot.commit, remote_name)
        except exec_util.CommandExecutionError as exc:
            if exc.missing:
                raise DependencyMissingError(str(exc)) from exc
            raise TransferFailedError(
                f"cannot transfer {short_id(snapshot.commit)} to "
                f"{self._config.remote_host}:{self._config.remote_path}: {exc}",
                recovery_hint="check ssh access and that remote_path is a git checkout",
            ) from exc
        log.info(f"transferred as {remote_name}; testing on {self._config.remote_host}")

        command = self.plan_for(snapshot).render()
        log.debug(f"remote command: {command}")
        try:
            result = self._executor.execute(command)
        except exec_util.CommandExecutionError as exc:
            if exc.missing:
                raise DependencyMissingError(str(exc)) from exc
            raise
        verdict = "passed" if result.succeeded else f"failed (exit {result.exit_status})"
        log.info(f"remote run {verdict} in {result.duration_seconds:.1f}s")
        return result
