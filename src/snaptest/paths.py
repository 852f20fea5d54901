"""Path helpers for locating snaptest configuration files."""

from pathlib import Path

from platformdirs import user_config_dir

SNAPTEST_APP_NAME = "snaptest"
USER_CONFIG_FILENAME = "config.json"
REPO_CONFIG_FILENAME = ".snaptest.json"


def snaptest_config_dir() -> Path:
    """Return the per-user snaptest configuration directory.

    Example:
        >>> isinstance(snaptest_config_dir(), Path)
        True
    """
    return Path(user_config_dir(SNAPTEST_APP_NAME))


def user_config_path() -> Path:
    """Return the per-user defaults file.

    Example:
        >>> user_config_path().name == USER_CONFIG_FILENAME
        True
    """
    return snaptest_config_dir() / USER_CONFIG_FILENAME


def repo_config_path(repo_root: Path) -> Path:
    """Return the repository-local override file.

    Example:
        >>> repo_config_path(Path("/tmp/repo")).name == REPO_CONFIG_FILENAME
        True
    """
    return repo_root / REPO_CONFIG_FILENAME
