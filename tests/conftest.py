# ruff: noqa: E402

import sys
from pathlib import Path

import pytest
from _pytest.doctest import DoctestModule

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import snaptest.log as snaptest_log
import snaptest.paths as paths

DOCTEST_MODULES = {
    ROOT / "src" / "snaptest" / "config.py",
    ROOT / "src" / "snaptest" / "git.py",
    ROOT / "src" / "snaptest" / "models.py",
    ROOT / "src" / "snaptest" / "paths.py",
    ROOT / "src" / "snaptest" / "remote.py",
    ROOT / "src" / "snaptest" / "remote_plan.py",
}


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(paths, "user_config_path", lambda: tmp_path / "user" / "config.json")
    monkeypatch.setattr(snaptest_log, "_configured_level", None)
    monkeypatch.setattr(snaptest_log, "_no_color_override", None)
    for name in (
        "SNAPTEST_REMOTE_HOST",
        "SNAPTEST_REMOTE_PATH",
        "SNAPTEST_MIN_FREE_SPACE",
        "SNAPTEST_SHARDS",
        "SNAPTEST_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


def pytest_collect_file(
    parent: pytest.Collector, file_path: Path
) -> DoctestModule | None:
    path = file_path if isinstance(file_path, Path) else Path(str(file_path))
    if path in DOCTEST_MODULES:
        return DoctestModule.from_parent(parent, path=path)
    return None
