"""
Configuration models and loading.

This module provides the pydantic model for .statecraft.json and the
resolution of command defaults: argument < env vars < project config.
"""

from .env import load_layered_env
from .loader import (
    ConfigError,
    get_project_config_path,
    load_config,
    resolve_board_path,
    resolve_port,
    save_config,
)
from .models import RuleOptions, StatecraftConfig

__all__ = [
    # Models
    "RuleOptions",
    "StatecraftConfig",
    # Loader functions
    "ConfigError",
    "get_project_config_path",
    "load_config",
    "load_layered_env",
    "resolve_board_path",
    "resolve_port",
    "save_config",
]
