"""
Tests for the render server's board watcher.

Tests BoardWatcher polling, change detection and missing-file handling.
"""

import os
from unittest.mock import Mock

from statecraft.core.render import BoardWatcher


def _write(path, content: str, bump: float = 1.0) -> None:
    """Write content and move mtime forward so the change is visible."""
    previous = path.stat().st_mtime if path.exists() else 0.0
    path.write_text(content)
    mtime = previous + bump
    os.utime(path, (mtime, mtime))


class TestBoardWatcher:
    """Tests for BoardWatcher class."""

    def test_init_sets_defaults(self, tmp_path):
        """Test BoardWatcher initialization sets defaults."""
        board_path = tmp_path / "board.yaml"
        watcher = BoardWatcher(board_path)

        assert watcher.board_path == board_path
        assert watcher.on_change is None
        assert watcher.poll_interval == 0.25

    def test_no_change_no_callback(self, tmp_path):
        """Test polling an untouched file does not notify."""
        board_path = tmp_path / "board.yaml"
        board_path.write_text("board: A\n")
        callback = Mock()
        watcher = BoardWatcher(board_path, on_change=callback)

        assert watcher.poll() == "board: A\n"
        callback.assert_not_called()

    def test_content_change_notifies(self, tmp_path):
        """Test a real edit calls on_change with the new text."""
        board_path = tmp_path / "board.yaml"
        board_path.write_text("board: A\n")
        callback = Mock()
        watcher = BoardWatcher(board_path, on_change=callback)

        _write(board_path, "board: B\n")
        watcher.poll()

        callback.assert_called_once_with("board: B\n")

    def test_touch_without_change_does_not_notify(self, tmp_path):
        """Test an mtime bump with identical content is ignored."""
        board_path = tmp_path / "board.yaml"
        board_path.write_text("board: A\n")
        callback = Mock()
        watcher = BoardWatcher(board_path, on_change=callback)

        _write(board_path, "board: A\n")
        watcher.poll()

        callback.assert_not_called()

    def test_file_created_after_start(self, tmp_path):
        """Test a board that appears later is reported."""
        board_path = tmp_path / "board.yaml"
        callback = Mock()
        watcher = BoardWatcher(board_path, on_change=callback)

        assert watcher.poll() is None
        board_path.write_text("board: New\n")
        watcher.poll()

        callback.assert_called_once_with("board: New\n")

    def test_file_removed_notifies_once(self, tmp_path):
        """Test deletion is reported as None exactly once."""
        board_path = tmp_path / "board.yaml"
        board_path.write_text("board: A\n")
        callback = Mock()
        watcher = BoardWatcher(board_path, on_change=callback)

        board_path.unlink()
        assert watcher.poll() is None
        assert watcher.poll() is None

        callback.assert_called_once_with(None)

    def test_read_missing_file(self, tmp_path):
        """Test read() returns None for a missing file."""
        assert BoardWatcher(tmp_path / "missing.yaml").read() is None
