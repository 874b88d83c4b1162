"""
Board file polling for the render server.

Watches the board file for changes and notifies consumers with the new text.
"""

import logging
from collections.abc import Callable
from pathlib import Path

logger = logging.getLogger(__name__)


class BoardWatcher:
    """
    Poll a board file and detect changes.

    Checks the file's modification time on every poll and re-reads it only
    when the mtime moved. The callback fires only when the text actually
    differs from the last seen text. A file that disappears (or cannot be
    read) is reported once as ``None``.

    Example:
        >>> def on_change(content: str | None) -> None:
        ...     print("board changed" if content is not None else "board gone")
        >>> watcher = BoardWatcher(Path("board.yaml"), on_change=on_change)
        >>> watcher.poll()  # Returns latest text
    """

    def __init__(
        self,
        board_path: Path,
        on_change: Callable[[str | None], None] | None = None,
        poll_interval: float = 0.25,
    ):
        """
        Initialize the board watcher.

        The current file state is taken as the baseline, so the first poll
        only reports a change if the file changed after construction.

        Args:
            board_path: Path to the board file
            on_change: Callback invoked with the new text (None if unreadable)
            poll_interval: Polling interval in seconds, used by the server loop
        """
        self.board_path = Path(board_path)
        self.on_change = on_change
        self.poll_interval = poll_interval

        self._last_mtime: float | None = self._stat_mtime()
        self._last_content: str | None = self.read() if self._last_mtime is not None else None

    def _stat_mtime(self) -> float | None:
        try:
            return self.board_path.stat().st_mtime
        except OSError:
            return None

    def read(self) -> str | None:
        """Read the board file as UTF-8, or None if it is missing or unreadable."""
        try:
            return self.board_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            return None

    def poll(self) -> str | None:
        """
        Poll the board file for updates.

        Returns:
            The current board text, or None if the file is missing/unreadable
        """
        mtime = self._stat_mtime()

        if mtime is None:
            if self._last_mtime is not None or self._last_content is not None:
                # File went away since the last poll
                self._last_mtime = None
                self._last_content = None
                self._notify(None)
            return None

        if mtime == self._last_mtime:
            return self._last_content

        content = self.read()
        self._last_mtime = mtime
        if content != self._last_content:
            self._last_content = content
            self._notify(content)
        return content

    def _notify(self, content: str | None) -> None:
        logger.debug("Board file %s changed", self.board_path)
        if self.on_change:
            self.on_change(content)
