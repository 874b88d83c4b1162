"""Environment loading helpers.

STATECRAFT_* settings can come from:
- the process environment (highest precedence)
- project env files (.env, .env.local in the project directory)
- the user env file (~/.config/statecraft/.env)

A value already exported in the shell is never replaced by a file. A project
file may replace a value that only came from the user file.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable

from dotenv import dotenv_values


def get_user_env_path() -> Path:
    """Return the user env file, honoring XDG_CONFIG_HOME."""
    config_home = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(config_home) / "statecraft" / ".env"


def _read_env(path: Path) -> dict[str, str]:
    if not path.is_file():
        return {}
    return {
        str(key): str(value)
        for key, value in dotenv_values(path).items()
        if key is not None and value is not None
    }


def load_layered_env(
    *,
    project_dir: Path | None = None,
    user_env_paths: Iterable[Path] | None = None,
    project_env_paths: Iterable[Path] | None = None,
) -> None:
    """Load environment variables from user and project env files.

    Args:
        project_dir: base directory for project env files (defaults to cwd)
        user_env_paths: explicit user env file paths
        project_env_paths: explicit project env file paths
    """
    if project_dir is None:
        project_dir = Path.cwd()
    if user_env_paths is None:
        user_env_paths = [get_user_env_path()]
    if project_env_paths is None:
        project_env_paths = [project_dir / ".env", project_dir / ".env.local"]

    from_user: set[str] = set()
    for path in user_env_paths:
        for key, value in _read_env(Path(path)).items():
            if key not in os.environ:
                os.environ[key] = value
                from_user.add(key)

    for path in project_env_paths:
        for key, value in _read_env(Path(path)).items():
            if key not in os.environ or key in from_user:
                os.environ[key] = value
