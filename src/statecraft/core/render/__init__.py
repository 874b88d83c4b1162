"""
Render server for statecraft boards.

Usage:
    from statecraft.core.render import create_app
"""

from .app import ConnectionManager, create_app, watch_board
from .watcher import BoardWatcher

__all__ = ["BoardWatcher", "ConnectionManager", "create_app", "watch_board"]
