"""Preference file management for package-manager.json.

Preference files live in the project's and the user's tool directories:

| Scope   | Location                              |
|---------|---------------------------------------|
| project | `<project>/.claude/package-manager.json` |
| global  | `~/.claude/package-manager.json`      |

Both hold a JSON object whose `packageManager` field names a candidate.
Other fields are preserved when a preference is written.
"""

import json
import os
import tempfile
from collections.abc import Mapping
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

from pmresolver.constants import (
    PREFERENCE_FIELD,
    PREFERENCE_FILENAME,
    PREFERENCE_TIMESTAMP_FIELD,
    TOOL_DIR_NAME,
)
from pmresolver.core.manager import PackageManager, require_package_manager
from pmresolver.exceptions import ConfigReadMalformedError, PreferenceWriteError


class PreferenceScope(Enum):
    """Where a preference file is stored."""

    PROJECT = "project"
    GLOBAL = "global"


def home_dir(env: Mapping[str, str]) -> Path:
    """Get the user's home directory from an environment snapshot.

    Falls back to the current user's home when neither HOME nor
    USERPROFILE is set.
    """
    home = env.get("HOME") or env.get("USERPROFILE")
    if home:
        return Path(home)
    return Path.home()


def project_preference_path(project_root: Path) -> Path:
    """Get the project-level preference file path."""
    return project_root / TOOL_DIR_NAME / PREFERENCE_FILENAME


def global_preference_path(env: Mapping[str, str]) -> Path:
    """Get the global (per-user) preference file path."""
    return home_dir(env) / TOOL_DIR_NAME / PREFERENCE_FILENAME


def preference_path(
    scope: PreferenceScope,
    project_root: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> Path:
    """Get the preference file path for a scope.

    Args:
        scope: Project or global
        project_root: Project directory (defaults to current working directory)
        env: Environment snapshot (defaults to the process environment)
    """
    if scope is PreferenceScope.GLOBAL:
        return global_preference_path(os.environ if env is None else env)
    return project_preference_path(project_root or Path.cwd())


def read_json_object(path: Path) -> dict[str, Any] | None:
    """Read a JSON object from a file.

    Args:
        path: Path to the JSON file

    Returns:
        The parsed object, or None if the file does not exist

    Raises:
        ConfigReadMalformedError: If the file cannot be read or is not a JSON object
    """
    if not path.is_file():
        return None

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError, RecursionError) as e:
        raise ConfigReadMalformedError(f"Failed to parse {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigReadMalformedError(
            f"Expected a JSON object in {path}, got {type(data).__name__}"
        )
    return data


def read_preference(path: Path) -> str | None:
    """Read the raw packageManager field of a preference file.

    Returns:
        The field value, or None if the file or the field is missing

    Raises:
        ConfigReadMalformedError: If the file exists but is not valid JSON
    """
    data = read_json_object(path)
    if data is None:
        return None
    value = data.get(PREFERENCE_FIELD)
    return value if isinstance(value, str) else None


def write_json_atomic(path: Path, data: dict[str, Any]) -> None:
    """Write a JSON object so readers see either the old or the new file.

    The content goes to a temporary file in the target directory, which is
    then renamed over the target.

    Raises:
        PreferenceWriteError: If the directory or the file cannot be written
    """
    tmp_name: str | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as f:
            tmp_name = f.name
            json.dump(data, f, indent=2)
            f.write("\n")
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise PreferenceWriteError(f"Failed to write {path}: {e}") from e


def set_preference(
    scope: PreferenceScope,
    candidate: str | PackageManager,
    project_root: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> Path:
    """Persist a package manager preference.

    Creates the preference file (and its directory) or updates the
    packageManager field of an existing one. An unreadable existing file
    is replaced.

    Args:
        scope: Project or global
        candidate: Package manager name
        project_root: Project directory (defaults to current working directory)
        env: Environment snapshot (defaults to the process environment)

    Returns:
        Path to the written preference file

    Raises:
        InvalidCandidateError: If candidate is not a supported package manager
        PreferenceWriteError: If the file cannot be written
    """
    pm = require_package_manager(candidate)
    path = preference_path(scope, project_root, env)

    try:
        data = read_json_object(path) or {}
    except ConfigReadMalformedError:
        data = {}

    data[PREFERENCE_FIELD] = pm.value
    data[PREFERENCE_TIMESTAMP_FIELD] = datetime.now(timezone.utc).isoformat()
    write_json_atomic(path, data)
    return path
