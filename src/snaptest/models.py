"""Pydantic models for snaptest configuration data."""

from __future__ import annotations

import re
import sys

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_MIN_FREE_SPACE_BYTES = 10 * 1024**3
DEFAULT_TEST_SHARD_COUNT = 4
DEFAULT_BUILD_COMMAND = "cd src && ./make.bash"
DEFAULT_TEST_COMMAND = "cd src && go test -short -p {shards} std cmd"
DEFAULT_EVICT_COMMAND = "go clean -cache"
DEFAULT_COMMIT_MESSAGE = "snaptest checkpoint"

_SIZE_RE = re.compile(r"^\s*(?P<number>\d+)\s*(?P<unit>[kmgt]?)(?:i?b)?\s*$", re.IGNORECASE)
_ENV_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_SIZE_UNITS = {"": 1, "k": 1024, "m": 1024**2, "g": 1024**3, "t": 1024**4}


def parse_size(value: object) -> int:
    """Parse a byte count given as an integer or a size string.

    Args:
        value: Integer byte count or a string such as ``"20G"`` or ``"512MiB"``.

    Returns:
        Size in bytes.

    Example:
        >>> parse_size("2G")
        2147483648
        >>> parse_size(4096)
        4096
    """
    if isinstance(value, bool):
        raise ValueError("size must be a number of bytes or a size like '10G'")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        match = _SIZE_RE.match(value)
        if match:
            number = int(match.group("number"))
            return number * _SIZE_UNITS[match.group("unit").lower()]
    raise ValueError("size must be a number of bytes or a size like '10G'")


def default_success_sound() -> list[str]:
    """Return the platform cue command played after a passing run."""
    if sys.platform == "darwin":
        return ["afplay", "/System/Library/Sounds/Glass.aiff"]
    return []


def default_failure_sound() -> list[str]:
    """Return the platform cue command played after a failing run."""
    if sys.platform == "darwin":
        return ["afplay", "/System/Library/Sounds/Basso.aiff"]
    return []


class SnaptestConfig(BaseModel):
    """Immutable run configuration shared by every pipeline component.

    Attributes:
        remote_host: ssh destination of the test machine.
        remote_path: Git checkout on the remote host used for test runs.
        min_free_space_bytes: Evict the remote build cache below this much
            free space.
        test_shard_count: Parallelism passed to the remote test invocation.
        remote_env: Environment exported before the remote build.
        build_command: Toolchain build/check step.
        test_command: Test suite entry point; ``{shards}`` is substituted.
        evict_command: Cache eviction step.
        format_command: Formatter run over changed files before a snapshot.
        format_suffixes: File suffixes passed to ``format_command``.
        git_path: Local git executable.
        ssh_command: ssh invocation prefix.
        success_sound: Cue command for passing runs (bell when empty).
        failure_sound: Cue command for failing runs (bell when empty).
        commit_message: Message recorded on snapshot commits.

    Example:
        >>> cfg = SnaptestConfig(remote_host="box", remote_path="/src/go")
        >>> cfg.min_free_space_bytes == DEFAULT_MIN_FREE_SPACE_BYTES
        True
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    remote_host: str
    remote_path: str
    min_free_space_bytes: int = DEFAULT_MIN_FREE_SPACE_BYTES
    test_shard_count: int = Field(default=DEFAULT_TEST_SHARD_COUNT, ge=1)
    remote_env: dict[str, str] = Field(default_factory=dict)
    build_command: str = DEFAULT_BUILD_COMMAND
    test_command: str = DEFAULT_TEST_COMMAND
    evict_command: str = DEFAULT_EVICT_COMMAND
    format_command: list[str] = Field(default_factory=lambda: ["gofmt", "-w"])
    format_suffixes: list[str] = Field(default_factory=lambda: [".go"])
    git_path: str = "git"
    ssh_command: list[str] = Field(default_factory=lambda: ["ssh"])
    success_sound: list[str] = Field(default_factory=default_success_sound)
    failure_sound: list[str] = Field(default_factory=default_failure_sound)
    commit_message: str = DEFAULT_COMMIT_MESSAGE

    @field_validator("remote_host", "remote_path", mode="before")
    @classmethod
    def require_text(cls, value: object) -> object:
        if isinstance(value, str):
            normalized = value.strip()
            if not normalized:
                raise ValueError("must not be empty")
            return normalized
        return value

    @field_validator("min_free_space_bytes", mode="before")
    @classmethod
    def normalize_size(cls, value: object) -> object:
        size = parse_size(value)
        if size < 0:
            raise ValueError("must not be negative")
        return size

    @field_validator("git_path", mode="before")
    @classmethod
    def normalize_git_path(cls, value: object) -> object:
        if value is None:
            return "git"
        if isinstance(value, str):
            normalized = value.strip()
            return normalized or "git"
        return value

    @field_validator("ssh_command")
    @classmethod
    def require_ssh_command(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("must name an ssh executable")
        return value

    @field_validator("remote_env")
    @classmethod
    def check_env_names(cls, value: dict[str, str]) -> dict[str, str]:
        for name in value:
            if not _ENV_NAME_RE.match(name):
                raise ValueError(f"invalid environment variable name: {name!r}")
        return value

    @field_validator("test_command")
    @classmethod
    def check_test_placeholders(cls, value: str) -> str:
        try:
            value.format(shards=1)
        except (KeyError, IndexError, ValueError) as exc:
            raise ValueError(f"only the {{shards}} placeholder is supported: {exc}") from exc
        return value
