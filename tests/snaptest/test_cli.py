import json
import re
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

from typer.testing import CliRunner

import snaptest.cli as cli
from snaptest.services import TransferFailedError
from tests.snaptest.helpers import make_config

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")


def _strip_ansi(output: str) -> str:
    return ANSI_ESCAPE_RE.sub("", output)


def test_run_exit_code_follows_outcome() -> None:
    runner = CliRunner()
    seen: list[SimpleNamespace] = []

    def fake_run(args: SimpleNamespace) -> int:
        seen.append(args)
        return 3

    with patch("snaptest.cli.run_cmd", fake_run):
        result = runner.invoke(
            cli.app, ["run", "--host", "box", "--shards", "8", "--min-free-space", "20G", "--no-format"]
        )

    assert result.exit_code == 3
    assert seen[0].host == "box"
    assert seen[0].path is None
    assert seen[0].shards == 8
    assert seen[0].min_free_space == "20G"
    assert seen[0].no_format is True


def test_service_failure_prints_error_and_hint() -> None:
    runner = CliRunner()

    def failing_run(_args: SimpleNamespace) -> int:
        raise TransferFailedError("failed to push c1 to box:/go", recovery_hint="check ssh access")

    with patch("snaptest.cli.run_cmd", failing_run):
        result = runner.invoke(cli.app, ["run"])

    assert result.exit_code == 1
    assert "error: failed to push c1 to box:/go" in result.output
    assert "hint: check ssh access" in result.output


def test_rejects_zero_shards() -> None:
    runner = CliRunner()
    with patch("snaptest.cli.run_cmd", lambda _args: 0):
        result = runner.invoke(cli.app, ["run", "--shards", "0"], color=False)

    assert result.exit_code != 0
    assert "--shards" in _strip_ansi(result.output)


def test_global_log_level_flag_sets_runtime_level() -> None:
    runner = CliRunner()
    with (
        patch("snaptest.cli.run_cmd", lambda _args: 0),
        patch("snaptest.cli.snaptest_log.set_level") as mock_set_level,
    ):
        result = runner.invoke(cli.app, ["--log-level", "DEBUG", "run"])

    assert result.exit_code == 0
    mock_set_level.assert_called_once_with("debug")


def test_global_log_level_rejects_unknown_values() -> None:
    runner = CliRunner()
    result = runner.invoke(cli.app, ["--log-level", "loud", "run"], color=False)

    assert result.exit_code != 0
    assert "--log-level" in _strip_ansi(result.output)


def test_no_color_flag_disables_colorized_output() -> None:
    runner = CliRunner()
    with (
        patch("snaptest.cli.run_cmd", lambda _args: 0),
        patch("snaptest.cli.snaptest_log.set_no_color") as mock_set_no_color,
    ):
        result = runner.invoke(cli.app, ["--no-color", "run"])

    assert result.exit_code == 0
    mock_set_no_color.assert_called_once_with(True)


def test_config_json_prints_resolved_settings() -> None:
    runner = CliRunner()
    resolved = (Path("/repo"), make_config(test_shard_count=6))
    with patch("snaptest.commands.config.resolve_repo_and_config", return_value=resolved):
        result = runner.invoke(cli.app, ["config", "--format", "json"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["remote_host"] == "builder"
    assert payload["test_shard_count"] == 6


def test_plan_renders_remote_command_for_commit() -> None:
    runner = CliRunner()

    class FakeStore:
        def __init__(self, repo_root: Path, *, git_path: str) -> None:
            self.repo_root = repo_root

        def resolve(self, ref: str) -> str:
            assert ref == "feature"
            return "abc123"

    resolved = (Path("/repo"), make_config())
    with (
        patch("snaptest.commands.plan.resolve_repo_and_config", return_value=resolved),
        patch("snaptest.commands.plan.GitHistoryStore", FakeStore),
    ):
        result = runner.invoke(cli.app, ["plan", "--commit", "feature"])

    assert result.exit_code == 0
    assert result.stdout.startswith("cd /home/dev/go && ")
    assert "git checkout -q --detach snaptest/abc123" in result.stdout


def test_version_flag() -> None:
    runner = CliRunner()
    result = runner.invoke(cli.app, ["--version"])

    assert result.exit_code == 0
    assert result.stdout.startswith("snaptest ")
