"""
Statecraft - YAML task boards for humans and AI assistants

Parse, validate, summarize, and render a board file made of columns and tasks.
"""

__version__ = "0.4.0"

# Re-export the board core for convenience
from statecraft.core.board import (
    Board,
    BoardReadError,
    Column,
    ParseError,
    Task,
    ValidationIssue,
    ValidationResult,
    parse_board,
    parse_board_from_string,
    summarize,
    validate,
    validate_board,
)

__all__ = [
    "Board",
    "BoardReadError",
    "Column",
    "ParseError",
    "Task",
    "ValidationIssue",
    "ValidationResult",
    "parse_board",
    "parse_board_from_string",
    "summarize",
    "validate",
    "validate_board",
    "__version__",
]
