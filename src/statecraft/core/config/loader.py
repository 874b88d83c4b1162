"""
Configuration loading and default resolution.

Implements the precedence chain used by every command that takes a board:
    explicit argument > STATECRAFT_* env vars > .statecraft.json > defaults
"""

import json
import logging
import os
from pathlib import Path

from pydantic import ValidationError

from statecraft.core.constants import (
    CONFIG_FILENAME,
    DEFAULT_BOARD_PATH,
    DEFAULT_RENDER_PORT,
    ENV_BOARD,
    ENV_PORT,
)

from .models import StatecraftConfig

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when .statecraft.json exists but cannot be used."""

    def __init__(self, path: Path, detail: str | None = None) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"{CONFIG_FILENAME} is invalid or missing required fields.")


def get_project_config_path(cwd: Path | None = None) -> Path:
    """
    Get path to the project configuration file.

    Args:
        cwd: Project directory (defaults to current directory)

    Returns:
        Path to .statecraft.json in that directory
    """
    if cwd is None:
        cwd = Path.cwd()
    return cwd / CONFIG_FILENAME


def load_config(project_dir: Path | None = None) -> StatecraftConfig | None:
    """
    Load .statecraft.json from the project directory.

    Args:
        project_dir: Directory holding .statecraft.json (defaults to cwd)

    Returns:
        The validated config, or None if the file does not exist

    Raises:
        ConfigError: If the file exists but is not valid JSON or fails validation
    """
    path = get_project_config_path(project_dir)
    if not path.exists():
        return None

    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        raise ConfigError(path, str(e)) from e

    try:
        return StatecraftConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(path, str(e)) from e


def save_config(config: StatecraftConfig, project_dir: Path | None = None) -> Path:
    """
    Write .statecraft.json with camelCase keys.

    Args:
        config: Configuration to write
        project_dir: Target directory (defaults to cwd)

    Returns:
        Path of the written file
    """
    path = get_project_config_path(project_dir)
    with path.open("w", encoding="utf-8") as f:
        json.dump(config.to_json_dict(), f, indent=2)
        f.write("\n")
    logger.debug("Wrote %s", path)
    return path


def resolve_board_path(explicit: str | None = None, project_dir: Path | None = None) -> str:
    """
    Decide which board file a command should use.

    Precedence (highest to lowest):
        1. The path given on the command line
        2. STATECRAFT_BOARD
        3. boardPath from .statecraft.json
        4. ./board.yaml

    An unreadable config is ignored here; commands that depend on it report
    the problem themselves.
    """
    if explicit:
        return explicit

    if env_board := os.environ.get(ENV_BOARD):
        return env_board

    try:
        config = load_config(project_dir)
    except ConfigError as e:
        logger.warning("Ignoring %s: %s", e.path, e.detail)
        config = None
    if config is not None:
        if project_dir is not None:
            return str(project_dir / config.board_path)
        return config.board_path

    return DEFAULT_BOARD_PATH


def resolve_port(explicit: int | None = None) -> int:
    """
    Decide which port the render server listens on.

    Precedence: --port, then STATECRAFT_PORT, then 3000. An invalid
    STATECRAFT_PORT is logged and ignored.
    """
    if explicit is not None:
        return explicit

    if port_str := os.environ.get(ENV_PORT):
        try:
            port = int(port_str)
            if 0 < port < 65536:
                return port
            logger.warning("%s must be between 1 and 65535, got %d, ignoring", ENV_PORT, port)
        except ValueError:
            logger.warning("Invalid %s value '%s', ignoring", ENV_PORT, port_str)

    return DEFAULT_RENDER_PORT
