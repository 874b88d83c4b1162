"""
Board parsing, validation and summarization.

The pipeline is:
    raw YAML -> parse_board() -> Board -> validate() / summarize()

Everything else in statecraft (CLI, render server, scaffolding) calls into
these functions.
"""

from .graph import BoardGraph
from .models import CANONICAL_COLUMNS, Board, Column, Task
from .parser import BoardReadError, ParseError, parse_board, parse_board_from_string
from .summarize import summarize
from .validation import (
    ValidationCode,
    ValidationIssue,
    ValidationResult,
    validate,
    validate_board,
)

__all__ = [
    "CANONICAL_COLUMNS",
    "Board",
    "BoardGraph",
    "BoardReadError",
    "Column",
    "ParseError",
    "Task",
    "ValidationCode",
    "ValidationIssue",
    "ValidationResult",
    "parse_board",
    "parse_board_from_string",
    "summarize",
    "validate",
    "validate_board",
]
