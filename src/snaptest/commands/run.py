"""Implementation for the ``snaptest run`` command."""

from __future__ import annotations

from .. import log
from ..services.checkpoint import CheckpointRequest, CheckpointService
from .resolve import resolve_repo_and_config


def run_checkpoint(args: object) -> int:
    """Snapshot the working tree, test it remotely, and advance HEAD on success.

    Returns:
        Process exit code for the outcome.
    """
    repo_root, config = resolve_repo_and_config(args)
    log.debug(f"repository: {repo_root}")
    service = CheckpointService.from_config(config, repo_root)
    outcome = service(CheckpointRequest(format_changes=not getattr(args, "no_format", False)))
    log.trace(f"outcome: {outcome.decision.outcome.value}")
    return outcome.exit_code
