"""Shared repository and configuration resolution for commands."""

from __future__ import annotations

import os
from pathlib import Path

from .. import config, git
from ..models import SnaptestConfig
from ..services.errors import ValidationFailedError


def cli_overrides(args: object) -> dict[str, object]:
    """Map command-line options onto configuration field names."""
    return {
        "remote_host": getattr(args, "host", None),
        "remote_path": getattr(args, "path", None),
        "min_free_space_bytes": getattr(args, "min_free_space", None),
        "test_shard_count": getattr(args, "shards", None),
    }


def resolve_repo_and_config(args: object, cwd: Path | None = None) -> tuple[Path, SnaptestConfig]:
    """Locate the enclosing repository and load its resolved configuration."""
    start = cwd or Path.cwd()
    repo_root = git.git_repo_root(start)
    if repo_root is None:
        raise ValidationFailedError(
            f"not inside a git repository: {start}",
            recovery_hint="run snaptest from the checkout you are developing in",
        )
    resolved = config.load_config(
        repo_root, environ=os.environ, overrides=cli_overrides(args)
    )
    return repo_root, resolved
