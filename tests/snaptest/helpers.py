from __future__ import annotations

from collections.abc import Callable

from snaptest import exec as exec_util
from snaptest.models import SnaptestConfig
from snaptest.pipeline.models import RunResult


def make_config(**overrides: object) -> SnaptestConfig:
    payload: dict[str, object] = {
        "remote_host": "builder",
        "remote_path": "/home/dev/go",
        "success_sound": ["play", "ok.aiff"],
        "failure_sound": ["play", "fail.aiff"],
    }
    payload.update(overrides)
    return SnaptestConfig.model_validate(payload)


def push_failure(detail: str = "command failed: git push") -> exec_util.CommandExecutionError:
    request = exec_util.CommandRequest(argv=("git", "push"))
    return exec_util.CommandExecutionError(
        request=request,
        detail=detail,
        result=exec_util.CommandResult(
            argv=request.argv, returncode=128, stdout="", stderr="fatal: unreachable"
        ),
    )


class FakeHistoryStore:
    """In-memory history store with a movable HEAD."""

    def __init__(self, head: str = "c0", head_tree: str = "t0", working_tree: str = "t1") -> None:
        self.head = head
        self.working_tree = working_tree
        self.trees: dict[str, str] = {head: head_tree}
        self.commits: list[tuple[str, str, str, str]] = []
        self.advance_calls: list[tuple[str, str]] = []
        self.format_calls = 0
        self.fail_on: str | None = None
        self._counter = 0

    def _maybe_fail(self, operation: str) -> None:
        if self.fail_on == operation:
            raise exec_util.CommandExecutionError(
                request=exec_util.CommandRequest(argv=("git", operation)),
                detail=f"command failed: git {operation}",
                result=exec_util.CommandResult(
                    argv=("git", operation), returncode=128, stdout="", stderr="fatal"
                ),
            )

    def current_head(self) -> str:
        self._maybe_fail("rev-parse")
        return self.head

    def write_tree(self) -> str:
        self._maybe_fail("write-tree")
        return self.working_tree

    def create_commit(self, tree: str, parent: str, message: str) -> str:
        self._maybe_fail("commit-tree")
        self._counter += 1
        commit = f"c{self._counter}"
        while commit in self.trees:
            self._counter += 1
            commit = f"c{self._counter}"
        self.trees[commit] = tree
        self.commits.append((commit, tree, parent, message))
        return commit

    def tree_of(self, commit: str) -> str:
        return self.trees[commit]

    def advance_head(self, commit: str, *, expected: str) -> bool:
        self.advance_calls.append((commit, expected))
        if self.head != expected:
            return False
        self.head = commit
        return True

    def format_changes(self) -> list[str]:
        self._maybe_fail("format")
        self.format_calls += 1
        return []

    def move_head(self, commit: str, tree: str) -> None:
        """Simulate a developer committing by hand."""
        self.trees[commit] = tree
        self.head = commit


class FakeRemoteExecutor:
    def __init__(
        self,
        exit_status: int = 0,
        *,
        interrupted: bool = False,
        on_execute: Callable[[], None] | None = None,
        transfer_error: Exception | None = None,
    ) -> None:
        self.exit_status = exit_status
        self.interrupted = interrupted
        self.on_execute = on_execute
        self.transfer_error = transfer_error
        self.transfers: list[tuple[str, str]] = []
        self.commands: list[str] = []

    def transfer(self, commit: str, remote_name: str) -> None:
        if self.transfer_error is not None:
            raise self.transfer_error
        self.transfers.append((commit, remote_name))

    def execute(self, command: str) -> RunResult:
        self.commands.append(command)
        if self.on_execute is not None:
            self.on_execute()
        return RunResult(
            exit_status=self.exit_status, duration_seconds=1.5, interrupted=self.interrupted
        )


class RecordingRunner:
    """Command runner that records requests and replays canned results."""

    def __init__(
        self,
        responses: dict[str, exec_util.CommandResult | None] | None = None,
        default_returncode: int = 0,
    ) -> None:
        self.requests: list[exec_util.CommandRequest] = []
        self.responses = responses or {}
        self.default_returncode = default_returncode

    def run(self, request: exec_util.CommandRequest) -> exec_util.CommandResult | None:
        self.requests.append(request)
        key = " ".join(request.argv)
        for fragment, response in self.responses.items():
            if fragment in key:
                return response
        return exec_util.CommandResult(
            argv=request.argv, returncode=self.default_returncode, stdout="", stderr=""
        )

    @property
    def argvs(self) -> list[tuple[str, ...]]:
        return [request.argv for request in self.requests]
