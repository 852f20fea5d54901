from __future__ import annotations

from pathlib import Path

import pytest

from snaptest import exec as exec_util
from snaptest.remote import SshRemoteExecutor
from tests.snaptest.helpers import RecordingRunner


class StepClock:
    def __init__(self, *values: float) -> None:
        self._values = list(values)

    def __call__(self) -> float:
        return self._values.pop(0)


def _executor(runner: exec_util.CommandRunner, clock: StepClock | None = None) -> SshRemoteExecutor:
    return SshRemoteExecutor(
        Path("/work/go"),
        "dev@builder",
        "/home/dev/go",
        ssh_command=("ssh", "-T"),
        runner=runner,
        clock=clock or StepClock(10.0, 72.5),
    )


def test_transfer_pushes_commit_to_run_specific_branch() -> None:
    runner = RecordingRunner()

    _executor(runner).transfer("abc123", "snaptest/abc123")

    assert runner.argvs == [
        (
            "git",
            "-C",
            "/work/go",
            "push",
            "-q",
            "dev@builder:/home/dev/go",
            "+abc123:refs/heads/snaptest/abc123",
        )
    ]


def test_transfer_failure_raises_command_error() -> None:
    failed = exec_util.CommandResult(
        argv=("git", "push"), returncode=128, stdout="", stderr="fatal: could not read"
    )
    runner = RecordingRunner(responses={"push": failed})

    with pytest.raises(exec_util.CommandExecutionError) as exc_info:
        _executor(runner).transfer("abc123", "snaptest/abc123")

    assert exc_info.value.missing is False
    assert "fatal: could not read" in str(exc_info.value)


def test_execute_streams_and_times_remote_command() -> None:
    runner = RecordingRunner(
        responses={
            "ssh": exec_util.CommandResult(argv=("ssh",), returncode=3, stdout="", stderr="")
        }
    )

    result = _executor(runner).execute("cd /home/dev/go && true")

    request = runner.requests[0]
    assert request.argv == ("ssh", "-T", "dev@builder", "cd /home/dev/go && true")
    assert request.capture_output is False
    assert result.exit_status == 3
    assert result.duration_seconds == pytest.approx(62.5)
    assert result.interrupted is False


def test_execute_treats_keyboard_interrupt_as_failure() -> None:
    class InterruptingRunner:
        def run(self, request: exec_util.CommandRequest) -> exec_util.CommandResult | None:
            raise KeyboardInterrupt

    result = _executor(InterruptingRunner(), StepClock(0.0, 5.0)).execute("true")

    assert result.interrupted is True
    assert result.succeeded is False
    assert result.exit_status == 130
    assert result.duration_seconds == 5.0


def test_execute_treats_signal_death_as_interrupted() -> None:
    runner = RecordingRunner(
        responses={"ssh": exec_util.CommandResult(argv=("ssh",), returncode=-15, stdout="", stderr="")}
    )

    result = _executor(runner).execute("true")

    assert result.interrupted is True
    assert result.exit_status == 143


def test_execute_without_ssh_raises_missing_command() -> None:
    runner = RecordingRunner(responses={"ssh": None})

    with pytest.raises(exec_util.CommandExecutionError) as exc_info:
        _executor(runner).execute("true")

    assert exc_info.value.missing is True
