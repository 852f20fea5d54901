"""Success/failure cues, status lines, and exit codes for pipeline outcomes."""

from __future__ import annotations

import sys
from collections.abc import Sequence

from . import exec as exec_util
from . import log
from .git import short_id
from .pipeline.models import Decision, Outcome

NO_CHANGES_MESSAGE = "Note: No changes since previous commit."
HEAD_MOVED_TEMPLATE = "Warning: Previous commit changed during testing; no longer {head}"

_SUCCESS_OUTCOMES = frozenset({Outcome.ADVANCED, Outcome.SKIPPED_EMPTY, Outcome.SKIPPED_RACE})


def exit_code_for(decision: Decision) -> int:
    """Map a decision to the process exit code.

    Passing and skipped outcomes exit 0. A failed run propagates the remote
    exit status, falling back to 1 when the run left no usable status.
    """
    if decision.outcome in _SUCCESS_OUTCOMES:
        return 0
    result = decision.run_result
    if result is None or result.exit_status == 0:
        return 1
    return result.exit_status


def status_line(decision: Decision) -> str:
    snapshot = decision.snapshot
    if decision.outcome is Outcome.ADVANCED:
        return f"HEAD advanced to {short_id(snapshot.commit)}"
    if decision.outcome is Outcome.SKIPPED_EMPTY:
        return NO_CHANGES_MESSAGE
    if decision.outcome is Outcome.SKIPPED_RACE:
        return HEAD_MOVED_TEMPLATE.format(head=short_id(snapshot.parent))
    result = decision.run_result
    if result is not None and result.interrupted:
        return f"Tests interrupted; HEAD left at {short_id(decision.current_head)}"
    status = result.exit_status if result is not None else "unknown"
    return f"Tests failed (exit {status}); HEAD left at {short_id(decision.current_head)}"


class Notifier:
    """Emit the audio cue and status line for a finished run."""

    def __init__(
        self,
        *,
        success_sound: Sequence[str] = (),
        failure_sound: Sequence[str] = (),
        runner: exec_util.CommandRunner | None = None,
    ) -> None:
        self._success_sound = tuple(success_sound)
        self._failure_sound = tuple(failure_sound)
        self._runner = runner

    def notify(self, decision: Decision) -> int:
        """Report ``decision`` and return the exit code for the process."""
        message = status_line(decision)
        if decision.outcome is Outcome.ADVANCED:
            log.success(message)
        elif decision.outcome is Outcome.SKIPPED_EMPTY:
            log.info(message)
        elif decision.outcome is Outcome.SKIPPED_RACE:
            log.warning(message)
            log.info(f"tested snapshot kept as {decision.snapshot.commit}")
        else:
            log.error(message)
        self.cue(decision.outcome in _SUCCESS_OUTCOMES)
        return exit_code_for(decision)

    def fatal(self, message: str) -> None:
        """Signal a run that aborted before reaching a decision."""
        log.debug(f"aborted: {message}")
        self.cue(False)

    def cue(self, passed: bool) -> None:
        command = self._success_sound if passed else self._failure_sound
        if not command:
            sys.stderr.write("\a")
            sys.stderr.flush()
            return
        result = exec_util.run_with_runner(
            exec_util.CommandRequest(argv=command), runner=self._runner
        )
        if result is None:
            log.debug(f"sound player not found: {command[0]}")
        elif result.returncode != 0:
            log.debug(f"sound player exited {result.returncode}: {' '.join(command)}")
