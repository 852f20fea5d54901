"""Typed remote step sequences and their shell rendering.

A :class:`RemotePlan` is an ordered tuple of steps. Steps are rendered to a
single POSIX shell command line only when handed to the remote executor; each
step is joined with ``&&`` so that the first failing step fails the sequence.

Example:
    >>> plan = RemotePlan(steps=(WorkdirStep("/src/go"), ResetStep()))
    >>> plan.render()
    'cd /src/go && git reset -q --hard'
"""

from __future__ import annotations

import shlex
from dataclasses import dataclass
from typing import Union

from .models import SnaptestConfig

REMOTE_REF_PREFIX = "snaptest/"
AVAILABLE_SPACE_VAR = "snaptest_avail_kb"


def remote_name_for(commit: str) -> str:
    """Return the run-specific remote branch name for a snapshot commit.

    Example:
        >>> remote_name_for("abc123")
        'snaptest/abc123'
    """
    return f"{REMOTE_REF_PREFIX}{commit}"


@dataclass(frozen=True)
class WorkdirStep:
    path: str

    def render(self) -> str:
        return f"cd {shlex.quote(self.path)}"


@dataclass(frozen=True)
class EnvironmentStep:
    variables: tuple[tuple[str, str], ...]

    def render(self) -> str:
        assignments = " ".join(f"{name}={shlex.quote(value)}" for name, value in self.variables)
        return f"export {assignments}"


@dataclass(frozen=True)
class CheckoutStep:
    remote_name: str

    def render(self) -> str:
        return f"git checkout -q --detach {shlex.quote(self.remote_name)}"


@dataclass(frozen=True)
class ResetStep:
    def render(self) -> str:
        return "git reset -q --hard"


@dataclass(frozen=True)
class SpaceCheckStep:
    """Record free space (in KiB) of the working filesystem."""

    def render(self) -> str:
        return f"{AVAILABLE_SPACE_VAR}=$(df -Pk . | awk 'NR==2 {{print $4}}')"


@dataclass(frozen=True)
class EvictStep:
    """Run ``command`` when the recorded free space is below the threshold."""

    min_free_space_bytes: int
    command: str

    @property
    def threshold_kib(self) -> int:
        return -(-self.min_free_space_bytes // 1024)

    def render(self) -> str:
        notice = shlex.quote("snaptest: free space below threshold; evicting build cache")
        # An unreadable df result counts as a full disk.
        return (
            f'if [ "${{{AVAILABLE_SPACE_VAR}:-0}}" -lt {self.threshold_kib} ]; '
            f"then echo {notice}; {self.command}; fi"
        )


@dataclass(frozen=True)
class BuildStep:
    command: str

    def render(self) -> str:
        return f"({self.command})"


@dataclass(frozen=True)
class TestStep:
    __test__ = False

    command: str
    shard_count: int

    def render(self) -> str:
        return f"({self.command.format(shards=self.shard_count)})"


RemoteStep = Union[
    WorkdirStep,
    EnvironmentStep,
    CheckoutStep,
    ResetStep,
    SpaceCheckStep,
    EvictStep,
    BuildStep,
    TestStep,
]


@dataclass(frozen=True)
class RemotePlan:
    steps: tuple[RemoteStep, ...]

    def render(self) -> str:
        return " && ".join(step.render() for step in self.steps)

    def step(self, kind: type) -> RemoteStep | None:
        for item in self.steps:
            if isinstance(item, kind):
                return item
        return None


def build_plan(config: SnaptestConfig, remote_name: str) -> RemotePlan:
    """Compose the remote test sequence for a transferred snapshot."""
    steps: list[RemoteStep] = [WorkdirStep(config.remote_path)]
    if config.remote_env:
        steps.append(EnvironmentStep(tuple(sorted(config.remote_env.items()))))
    steps.extend(
        [
            CheckoutStep(remote_name),
            ResetStep(),
            SpaceCheckStep(),
            EvictStep(config.min_free_space_bytes, config.evict_command),
            BuildStep(config.build_command),
            TestStep(config.test_command, config.test_shard_count),
        ]
    )
    return RemotePlan(tuple(steps))
