"""Implementation for the ``snaptest config`` command."""

from __future__ import annotations

import json

from rich import box
from rich.console import Console
from rich.table import Table

from ..io import say
from ..services.errors import ValidationFailedError
from .resolve import resolve_repo_and_config

_FORMATS = {"table", "json"}


def show_config(args: object) -> None:
    """Show the resolved configuration for the current repository."""
    format_value = str(getattr(args, "format", "table") or "table").lower()
    if format_value not in _FORMATS:
        raise ValidationFailedError(f"unsupported format: {format_value}")
    _repo_root, config = resolve_repo_and_config(args)
    payload = config.model_dump()
    if format_value == "json":
        say(json.dumps(payload, indent=2))
        return
    table = Table(box=box.SIMPLE, show_header=True)
    table.add_column("Setting")
    table.add_column("Value")
    for key, value in payload.items():
        table.add_row(key, json.dumps(value) if not isinstance(value, str) else value)
    Console().print(table)
