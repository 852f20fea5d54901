"""Git history store used by the snapshot pipeline."""

import os
import shutil
import tempfile
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Callable, TypeVar

from . import exec as exec_util
from . import log

ParsedT = TypeVar("ParsedT")

ADVANCE_REFLOG_MESSAGE = "snaptest: advance to tested snapshot"


def git_command(args: list[str], *, git_path: str | None = None) -> list[str]:
    """Build a git command using an optional executable path.

    Example:
        >>> git_command(["status"], git_path="/usr/bin/git")
        ['/usr/bin/git', 'status']
    """
    resolved = git_path.strip() if isinstance(git_path, str) else ""
    if not resolved:
        resolved = "git"
    return [resolved, *args]


def git_repo_root(
    start: Path,
    *,
    git_path: str | None = None,
    runner: exec_util.CommandRunner | None = None,
) -> Path | None:
    """Return the git repository root for a starting path.

    Args:
        start: Directory to search from.

    Returns:
        Repo root path or ``None`` if not inside a git repository.
    """
    result = exec_util.run_with_runner(
        exec_util.CommandRequest(
            argv=tuple(
                git_command(["-C", str(start), "rev-parse", "--show-toplevel"], git_path=git_path)
            )
        ),
        runner=runner,
    )
    if result is None or result.returncode != 0:
        return None
    resolved = result.stdout.strip()
    if not resolved:
        return None
    return Path(resolved)


def short_id(commit: str) -> str:
    """Abbreviate an object name for display.

    Example:
        >>> short_id("0123456789abcdef")
        '0123456789ab'
    """
    return commit[:12]


class GitHistoryStore:
    """History store backed by git plumbing commands.

    Snapshot trees are written through a private temporary index, so the
    developer's staging area is never modified while building a snapshot.
    """

    def __init__(
        self,
        repo_dir: Path,
        *,
        git_path: str | None = None,
        format_command: Sequence[str] = (),
        format_suffixes: Sequence[str] = (),
        runner: exec_util.CommandRunner | None = None,
    ) -> None:
        self.repo_dir = repo_dir
        self._git_path = git_path
        self._format_command = tuple(format_command)
        self._format_suffixes = tuple(format_suffixes)
        self._runner = runner

    def _request(
        self, args: list[str], *, env: Mapping[str, str] | None = None
    ) -> exec_util.CommandRequest:
        return exec_util.CommandRequest(
            argv=tuple(git_command(["-C", str(self.repo_dir), *args], git_path=self._git_path)),
            env=env,
        )

    def _git(
        self,
        args: list[str],
        parser: Callable[[exec_util.CommandResult], ParsedT],
        *,
        env: Mapping[str, str] | None = None,
        context: str | None = None,
    ) -> ParsedT:
        spec = exec_util.CommandSpec(
            request=self._request(args, env=env), parser=parser, context=context
        )
        return exec_util.run_typed(spec, runner=self._runner)

    def resolve(self, ref: str) -> str:
        return self._git(
            ["rev-parse", "--verify", f"{ref}^{{commit}}"], exec_util.parse_stripped, context=ref
        )

    def current_head(self) -> str:
        return self.resolve("HEAD")

    def tree_of(self, commit: str) -> str:
        return self._git(
            ["rev-parse", "--verify", f"{commit}^{{tree}}"],
            exec_util.parse_stripped,
            context=f"tree of {short_id(commit)}",
        )

    def _index_path(self) -> Path:
        raw = self._git(
            ["rev-parse", "--git-path", "index"], exec_util.parse_stripped, context="index path"
        )
        path = Path(raw)
        if not path.is_absolute():
            path = self.repo_dir / path
        return path

    def write_tree(self) -> str:
        """Record every tracked change and new file as a tree object."""
        with tempfile.TemporaryDirectory(prefix="snaptest-") as tmp:
            temp_index = Path(tmp) / "index"
            env = {**os.environ, "GIT_INDEX_FILE": str(temp_index)}
            real_index = self._index_path()
            if real_index.exists():
                # Seeds the stat cache so `add -A` only rehashes modified files.
                shutil.copyfile(real_index, temp_index)
            else:
                self._git(["read-tree", "HEAD"], exec_util.parse_nothing, env=env)
            self._git(["add", "-A"], exec_util.parse_nothing, env=env)
            return self._git(
                ["write-tree"], exec_util.parse_stripped, env=env, context="write-tree"
            )

    def create_commit(self, tree: str, parent: str, message: str) -> str:
        return self._git(
            ["commit-tree", tree, "-p", parent, "-m", message],
            exec_util.parse_stripped,
            context="commit-tree",
        )

    def advance_head(self, commit: str, *, expected: str) -> bool:
        """Move HEAD to ``commit`` only if it still points at ``expected``.

        Returns:
            ``False`` when HEAD no longer matches ``expected``.
        """
        result = exec_util.run_with_runner(
            self._request(["update-ref", "-m", ADVANCE_REFLOG_MESSAGE, "HEAD", commit, expected]),
            runner=self._runner,
        )
        if result is None:
            raise exec_util.CommandExecutionError(
                request=self._request(["update-ref"]),
                detail="missing required command: git",
            )
        if result.returncode != 0:
            log.debug(f"update-ref refused: {(result.stderr or result.stdout).strip()}")
            return False
        # The snapshot tree is the working tree, so only the index needs to follow.
        try:
            self._git(["reset", "-q"], exec_util.parse_nothing)
        except exec_util.CommandExecutionError as exc:
            log.warning(
                f"HEAD advanced but the index was not refreshed; run 'git reset -q': {exc}"
            )
        return True

    def changed_files(self) -> list[str]:
        """Return modified tracked files and untracked, non-ignored files."""
        tracked = self._git(
            ["diff", "--name-only", "--diff-filter=ACMR", "HEAD"], exec_util.parse_lines
        )
        untracked = self._git(
            ["ls-files", "--others", "--exclude-standard"], exec_util.parse_lines
        )
        return sorted(set(tracked) | set(untracked))

    def format_changes(self) -> list[str]:
        """Run the configured formatter over changed files.

        Returns:
            Repository-relative paths handed to the formatter.
        """
        if not self._format_command:
            return []
        targets = [
            name
            for name in self.changed_files()
            if name.endswith(self._format_suffixes) and (self.repo_dir / name).is_file()
        ]
        if not targets:
            return []
        request = exec_util.CommandRequest(
            argv=(*self._format_command, *targets), cwd=self.repo_dir
        )
        result = exec_util.run_with_runner(request, runner=self._runner)
        if result is None:
            log.warning(f"formatter not found: {self._format_command[0]}; skipping")
            return []
        if result.returncode != 0:
            output = (result.stderr or result.stdout or "").strip()
            raise exec_util.CommandExecutionError(
                request=request,
                result=result,
                detail=f"formatter failed: {' '.join(self._format_command)}\n{output}".rstrip(),
            )
        log.debug(f"formatted {len(targets)} file(s)")
        return targets
