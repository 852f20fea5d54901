"""Implementation for the ``snaptest plan`` command."""

from __future__ import annotations

from .. import exec as exec_util
from ..git import GitHistoryStore
from ..io import say
from ..remote_plan import build_plan, remote_name_for
from ..services.errors import ValidationFailedError
from .resolve import resolve_repo_and_config


def show_plan(args: object) -> None:
    """Print the remote command a run would execute, without contacting the remote."""
    repo_root, config = resolve_repo_and_config(args)
    store = GitHistoryStore(repo_root, git_path=config.git_path)
    ref = getattr(args, "commit", None) or "HEAD"
    try:
        commit = store.resolve(ref)
    except (exec_util.CommandExecutionError, exec_util.CommandParseError) as exc:
        raise ValidationFailedError(f"cannot resolve {ref}: {exc}") from exc
    say(build_plan(config, remote_name_for(commit)).render())
