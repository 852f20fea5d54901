"""Remote executor backed by ``git push`` and ``ssh``."""

from __future__ import annotations

import time
from collections.abc import Callable, Sequence
from pathlib import Path

from . import exec as exec_util
from . import log
from .git import git_command
from .pipeline.models import INTERRUPTED_EXIT_STATUS, RunResult

SSH_CONNECTION_FAILED = 255


def push_url(remote_host: str, remote_path: str) -> str:
    """Return the scp-style git URL of the remote checkout.

    Example:
        >>> push_url("builder", "/home/me/go")
        'builder:/home/me/go'
    """
    return f"{remote_host}:{remote_path}"


class SshRemoteExecutor:
    """Ships commits with ``git push`` and runs commands through ``ssh``.

    ``execute`` streams the remote transcript straight to the terminal; only
    the exit status and elapsed time are returned.
    """

    def __init__(
        self,
        repo_dir: Path,
        remote_host: str,
        remote_path: str,
        *,
        git_path: str | None = None,
        ssh_command: Sequence[str] = ("ssh",),
        runner: exec_util.CommandRunner | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.repo_dir = repo_dir
        self.remote_host = remote_host
        self.remote_path = remote_path
        self._git_path = git_path
        self._ssh_command = tuple(ssh_command)
        self._runner = runner
        self._clock = clock

    def transfer(self, commit: str, remote_name: str) -> None:
        """Push ``commit`` to ``refs/heads/<remote_name>`` on the remote checkout."""
        url = push_url(self.remote_host, self.remote_path)
        refspec = f"+{commit}:refs/heads/{remote_name}"
        argv = git_command(
            ["-C", str(self.repo_dir), "push", "-q", url, refspec], git_path=self._git_path
        )
        log.debug(f"pushing {refspec} to {url}")
        exec_util.run_typed(
            exec_util.CommandSpec(
                request=exec_util.CommandRequest(argv=tuple(argv)),
                parser=exec_util.parse_nothing,
                context="push",
            ),
            runner=self._runner,
        )

    def execute(self, command: str) -> RunResult:
        """Run ``command`` on the remote host and wait for it to finish."""
        request = exec_util.CommandRequest(
            argv=(*self._ssh_command, self.remote_host, command),
            capture_output=False,
            text=False,
        )
        started = self._clock()
        try:
            result = exec_util.run_with_runner(request, runner=self._runner)
        except KeyboardInterrupt:
            elapsed = self._clock() - started
            log.warning("remote run interrupted")
            return RunResult(
                exit_status=INTERRUPTED_EXIT_STATUS,
                duration_seconds=elapsed,
                interrupted=True,
            )
        elapsed = self._clock() - started
        if result is None:
            raise exec_util.CommandExecutionError(
                request=request,
                detail=f"missing required command: {self._ssh_command[0]}",
            )
        if result.returncode == SSH_CONNECTION_FAILED:
            log.warning(f"connection to {self.remote_host} failed or dropped")
        if result.returncode < 0:
            # Killed by a signal: no usable verdict from the remote side.
            return RunResult(
                exit_status=128 - result.returncode,
                duration_seconds=elapsed,
                interrupted=True,
            )
        return RunResult(exit_status=result.returncode, duration_seconds=elapsed)
