"""Manages the discovery and provision of fixed paths for TransResolve."""
# src/transresolve/paths.py

from functools import lru_cache
from pathlib import Path
from typing import Final

CONFIG_FILE_NAMES: Final[list[str]] = ["config.yaml", "config.yml"]
APP_SUBDIR: Final[Path] = Path(".transresolve")


@lru_cache(maxsize=1)
def find_project_root(start_path: Path | None = None) -> Path:
    """
    Find the project root by searching upwards from the start_path (or CWD) for the '.transresolve' anchor.

    The directory containing a '.transresolve' directory with a config file is the project root.

    Args:
        start_path: The path to start searching from. Defaults to CWD.

    Raises:
        FileNotFoundError: If the anchor config file is not found in any parent directory.

    """
    current_dir = (start_path or Path.cwd()).resolve()
    for parent in [current_dir, *current_dir.parents]:
        app_dir = parent / APP_SUBDIR
        if app_dir.is_dir() and any((app_dir / name).is_file() for name in CONFIG_FILE_NAMES):
            return parent

    msg = f"Could not find a configuration file ({' or '.join(CONFIG_FILE_NAMES)}) in a '{APP_SUBDIR}' directory from the current location upwards. Run 'transresolve init' first."
    raise FileNotFoundError(msg)


def get_config_file_path(root_path: Path | None = None) -> Path:
    """Find and return the full path to the config.yaml or config.yml file."""
    app_dir = find_project_root(root_path) / APP_SUBDIR
    for name in CONFIG_FILE_NAMES:
        path = app_dir / name
        if path.is_file():
            return path
    msg = "Configuration file disappeared after being found."
    raise FileNotFoundError(msg)


def get_log_dir(root_path: Path | None = None) -> Path:
    """Return the path to the log directory."""
    return find_project_root(root_path) / APP_SUBDIR / "logs"


def get_report_dir(root_path: Path | None = None) -> Path:
    """Return the path to the report directory."""
    return find_project_root(root_path) / APP_SUBDIR / "reports"


def ensure_dir_exists(path: Path) -> None:
    """Ensure a directory exists, creating it if necessary."""
    path.mkdir(parents=True, exist_ok=True)
