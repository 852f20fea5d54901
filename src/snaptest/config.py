"""Configuration helpers for snaptest.

This module reads the per-user ``config.json`` and the repository-local
``.snaptest.json``, applies environment and CLI overrides, and validates the
merged payload with the :class:`~snaptest.models.SnaptestConfig` model.

Example:
    >>> from snaptest.config import overrides_from_env
    >>> overrides_from_env({"SNAPTEST_SHARDS": "8"})
    {'test_shard_count': '8'}
"""

import json
from collections.abc import Mapping
from pathlib import Path

from pydantic import ValidationError

from . import log, paths
from .models import SnaptestConfig
from .services.errors import ValidationFailedError

ENV_OVERRIDES = {
    "SNAPTEST_REMOTE_HOST": "remote_host",
    "SNAPTEST_REMOTE_PATH": "remote_path",
    "SNAPTEST_MIN_FREE_SPACE": "min_free_space_bytes",
    "SNAPTEST_SHARDS": "test_shard_count",
}


def load_json(path: Path) -> dict | None:
    """Load a JSON object from disk if the file exists.

    Args:
        path: Path to the JSON file.

    Returns:
        Parsed payload, or ``None`` when the file does not exist.

    Example:
        >>> from pathlib import Path
        >>> load_json(Path("missing.json")) is None
        True
    """
    if not path.exists():
        return None
    try:
        with path.open("r", encoding="utf-8") as fh:
            payload = json.load(fh)
    except json.JSONDecodeError as exc:
        raise ValidationFailedError(f"invalid JSON in {path}: {exc}") from exc
    except OSError as exc:
        raise ValidationFailedError(f"cannot read {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ValidationFailedError(f"config at {path} must be a JSON object")
    return payload


def overrides_from_env(environ: Mapping[str, str]) -> dict[str, str]:
    """Collect configuration overrides from ``SNAPTEST_*`` variables."""
    overrides: dict[str, str] = {}
    for name, field in ENV_OVERRIDES.items():
        value = environ.get(name, "").strip()
        if value:
            overrides[field] = value
    return overrides


def parse_config(payload: dict, source: str | None = None) -> SnaptestConfig:
    """Validate a merged configuration payload."""
    try:
        return SnaptestConfig.model_validate(payload)
    except ValidationError as exc:
        location = f" ({source})" if source else ""
        raise ValidationFailedError(
            f"invalid snaptest config{location}:\n{exc}",
            recovery_hint=(
                f"set remote_host and remote_path in {paths.user_config_path()} "
                f"or {paths.REPO_CONFIG_FILENAME}"
            ),
        ) from exc


def load_config(
    repo_root: Path | None,
    *,
    environ: Mapping[str, str] | None = None,
    overrides: Mapping[str, object] | None = None,
) -> SnaptestConfig:
    """Resolve configuration from files, environment, and CLI overrides.

    Later sources win: user file, repository file, environment, overrides.
    ``None`` override values are ignored.
    """
    merged: dict[str, object] = {}
    sources: list[str] = []

    user_path = paths.user_config_path()
    user_payload = load_json(user_path)
    if user_payload:
        merged.update(user_payload)
        sources.append(str(user_path))

    if repo_root is not None:
        repo_path = paths.repo_config_path(repo_root)
        repo_payload = load_json(repo_path)
        if repo_payload:
            merged.update(repo_payload)
            sources.append(str(repo_path))

    env_payload = overrides_from_env(environ or {})
    if env_payload:
        merged.update(env_payload)
        sources.append("environment")

    cli_payload = {key: value for key, value in (overrides or {}).items() if value is not None}
    if cli_payload:
        merged.update(cli_payload)
        sources.append("command line")

    log.trace(f"config sources: {', '.join(sources) or 'defaults'}")
    return parse_config(merged, ", ".join(sources) or None)
