"""Locate Jest configuration files and project roots on disk."""

import json
import logging
from pathlib import Path

from ...constants import JEST_CONFIG_FILES, PROJECT_ROOT_MARKERS

logger = logging.getLogger(__name__)


def find_package_root(start: str | Path) -> Path | None:
    """Nearest directory at or above `start` containing package.json."""

    for directory in _ancestors(start):
        if (directory / "package.json").is_file():
            return directory
    return None


def find_nearest_jest_config(start: str | Path) -> tuple[Path | None, Path | None]:
    """
    Walk upward from `start` looking for a Jest config.

    Within a directory, JEST_CONFIG_FILES order decides, then a package.json
    with a "jest" key. Jest reads that key when given the package.json as
    `--config`. The walk stops at the package root (nearest package.json)
    when there is one.

    Returns:
        (config_path, project_root); either may be None
    """
    project_root = find_package_root(start)

    for directory in _ancestors(start):
        for name in JEST_CONFIG_FILES:
            candidate = directory / name
            if candidate.is_file():
                return candidate, project_root
        if _has_jest_key(directory / "package.json"):
            return directory / "package.json", project_root
        if directory == project_root:
            break

    return None, project_root


def detect_project_root(start: str | Path) -> Path:
    """
    Find the repository root above `start`.

    A directory qualifies when it holds package.json together with one of
    PROJECT_ROOT_MARKERS; falls back to the nearest package.json, then to
    `start` itself.
    """
    for directory in _ancestors(start):
        if (directory / "package.json").is_file() and any(
            (directory / marker).exists() for marker in PROJECT_ROOT_MARKERS
        ):
            return directory

    return find_package_root(start) or _as_directory(start)


def _has_jest_key(package_json: Path) -> bool:
    if not package_json.is_file():
        return False
    try:
        data = json.loads(package_json.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable %s: %s", package_json, e)
        return False
    return isinstance(data, dict) and isinstance(data.get("jest"), dict)


def _as_directory(start: str | Path) -> Path:
    path = Path(start).resolve()
    return path if path.is_dir() else path.parent


def _ancestors(start: str | Path) -> list[Path]:
    directory = _as_directory(start)
    return [directory, *directory.parents]
