"""
Tests for the board parser.

Covers YAML parsing into Board models, structural error messages with
locators, dependency normalization and file reading.
"""

from pathlib import Path

import pytest

from statecraft.core.board import (
    Board,
    BoardReadError,
    Column,
    ParseError,
    parse_board,
    parse_board_from_string,
)
from statecraft.core.board.parser import looks_like_path


def _board(columns: str = "[Backlog, Ready, In Progress, Done]", tasks: str = "{}") -> str:
    return f"board: Test\ncolumns: {columns}\ntasks: {tasks}\n"


class TestParseValidBoards:
    """Tests for boards that parse successfully."""

    def test_parses_columns_and_tasks_in_order(self, valid_board_yaml):
        """Test columns keep file order and every task entry is present."""
        board = parse_board_from_string(valid_board_yaml)

        assert isinstance(board, Board)
        assert board.name == "Payments"
        assert board.column_names == ["Backlog", "Ready", "In Progress", "Done"]
        assert list(board.tasks) == ["auth-login", "auth-session", "billing-export"]

    def test_string_and_object_columns(self, valid_board):
        """Test string columns normalize to Column and object columns keep limit."""
        assert valid_board.columns[0] == Column(name="Backlog")
        assert valid_board.columns[2] == Column(name="In Progress", limit=2)

    def test_optional_task_fields(self, valid_board):
        """Test owner and priority are carried through."""
        task = valid_board.tasks["auth-session"]

        assert task.title == "Session refresh"
        assert task.status == "In Progress"
        assert task.owner == "sam"
        assert task.priority == "high"
        assert task.description is None
        assert task.spec is None

    def test_single_dependency_string_becomes_list(self, valid_board):
        """Test depends_on given as a string normalizes to one element."""
        assert valid_board.tasks["auth-session"].depends_on == ["auth-login"]

    def test_dependency_list_is_preserved(self, valid_board):
        """Test depends_on given as a list keeps order."""
        assert valid_board.tasks["billing-export"].depends_on == ["auth-session", "auth-login"]

    def test_missing_depends_on_is_none(self, valid_board):
        """Test a task without depends_on has no dependencies."""
        task = valid_board.tasks["auth-login"]
        assert task.depends_on is None
        assert task.dependencies == []

    def test_empty_tasks_map(self):
        """Test tasks: {} is allowed."""
        board = parse_board_from_string(_board())
        assert board.tasks == {}

    def test_numeric_task_ids_become_strings(self):
        """Test YAML integer keys are stringified."""
        board = parse_board_from_string(_board(tasks="{1: {title: A, status: Backlog}}"))
        assert list(board.tasks) == ["1"]

    def test_integral_float_limit_is_accepted(self):
        """Test limit: 3.0 is read as 3."""
        board = parse_board_from_string(_board(columns="[{name: Backlog, limit: 3.0}]"))
        assert board.columns[0].limit == 3

    def test_yes_on_and_dates_stay_strings(self):
        """Test yes/on/no words and dates are read as text."""
        board = parse_board_from_string(
            _board(
                columns="[Backlog, Ready, on, Done]",
                tasks="{T1: {title: yes, status: on, owner: no, priority: 2024-01-01}}",
            )
        )

        task = board.tasks["T1"]
        assert task.title == "yes"
        assert task.status == "on"
        assert task.owner == "no"
        assert task.priority == "2024-01-01"
        assert board.column_names[2] == "on"

    def test_to_dict_round_trips(self, valid_board):
        """Test to_dict() produces YAML-shaped data that parses back to the same board."""
        data = valid_board.to_dict()

        assert data["board"] == "Payments"
        assert "owner" not in data["tasks"]["auth-login"]
        assert Board.model_validate(data) == valid_board


class TestParseErrors:
    """Tests for structural errors and their messages."""

    def test_invalid_yaml(self):
        """Test syntactically broken YAML is reported."""
        with pytest.raises(ParseError, match="Invalid YAML"):
            parse_board_from_string("board: [unclosed\n")

    def test_root_must_be_mapping(self):
        """Test a YAML list at the root is rejected."""
        with pytest.raises(ParseError, match="root: expected an object"):
            parse_board_from_string("- a\n- b\n")

    @pytest.mark.parametrize("field", ["board", "columns", "tasks"])
    def test_missing_required_field(self, field):
        """Test each missing top-level field is named in the error."""
        data = {
            "board": "board: Test",
            "columns": "columns: [Backlog]",
            "tasks": "tasks: {}",
        }
        del data[field]
        with pytest.raises(ParseError, match=f"Missing required field: {field}"):
            parse_board_from_string("\n".join(data.values()))

    def test_empty_board_name(self):
        """Test a blank board name is rejected."""
        with pytest.raises(ParseError, match="board must be a non-empty string"):
            parse_board_from_string("board: '  '\ncolumns: [Backlog]\ntasks: {}\n")

    def test_columns_not_a_list(self):
        """Test columns given as a mapping is rejected."""
        with pytest.raises(ParseError, match="columns: expected an array"):
            parse_board_from_string(_board(columns="{Backlog: 1}"))

    def test_columns_empty(self):
        """Test an empty columns list is rejected."""
        with pytest.raises(ParseError, match="columns must be a non-empty array"):
            parse_board_from_string(_board(columns="[]"))

    def test_column_object_without_name(self):
        """Test a column object needs a name."""
        with pytest.raises(ParseError, match=r"columns\[0\]"):
            parse_board_from_string(_board(columns="[{limit: 2}]"))

    @pytest.mark.parametrize("limit", ["0", "-1", "1.5", "two", "true", "null"])
    def test_invalid_limit(self, limit):
        """Test limits must be positive integers."""
        with pytest.raises(ParseError, match=r"columns\[1\]\.limit"):
            parse_board_from_string(_board(columns=f"[Backlog, {{name: Ready, limit: {limit}}}]"))

    def test_tasks_not_a_mapping(self):
        """Test tasks given as a list is rejected."""
        with pytest.raises(ParseError, match="tasks must be an object"):
            parse_board_from_string(_board(tasks="[a, b]"))

    def test_task_missing_title(self):
        """Test a task without a title names the task."""
        with pytest.raises(ParseError, match=r'tasks\.T1: missing required field "title"'):
            parse_board_from_string(_board(tasks="{T1: {status: Backlog}}"))

    def test_task_missing_status(self):
        """Test a task without a status names the task."""
        with pytest.raises(ParseError, match=r'tasks\.T1: missing required field "status"'):
            parse_board_from_string(_board(tasks="{T1: {title: A}}"))

    def test_task_wrong_optional_type(self):
        """Test optional fields must be strings."""
        with pytest.raises(ParseError, match=r"tasks\.T1\.owner"):
            parse_board_from_string(_board(tasks="{T1: {title: A, status: Backlog, owner: 5}}"))

    def test_depends_on_wrong_type(self):
        """Test depends_on entries must be strings."""
        with pytest.raises(ParseError, match=r"tasks\.T1\.depends_on\[1\]"):
            parse_board_from_string(
                _board(tasks="{T1: {title: A, status: Backlog, depends_on: [T2, 3]}}")
            )

    def test_duplicate_task_id(self):
        """Test a task id repeated under tasks is rejected, not overwritten."""
        content = (
            "board: Test\n"
            "columns: [Backlog, Ready, In Progress, Done]\n"
            "tasks:\n"
            "  T1: {title: first, status: Backlog}\n"
            "  T1: {title: second, status: Done}\n"
        )
        with pytest.raises(ParseError, match='(?s)Invalid YAML: .*duplicate key "T1"'):
            parse_board_from_string(content)

    def test_duplicate_top_level_key(self):
        """Test a repeated top-level key is rejected."""
        content = "board: One\nboard: Two\ncolumns: [Backlog]\ntasks: {}\n"
        with pytest.raises(ParseError, match='(?s)Invalid YAML: .*duplicate key "board"'):
            parse_board_from_string(content)

    def test_non_string_scalar_suggests_quoting(self):
        """Test a number where text is expected asks for quotes."""
        with pytest.raises(ParseError, match=r"tasks\.T1\.title: .*quote the value"):
            parse_board_from_string(_board(tasks="{T1: {title: 42, status: Backlog}}"))


class TestLooksLikePath:
    """Tests for the path-or-content heuristic."""

    @pytest.mark.parametrize(
        "source",
        ["board.yaml", "board.yml", "docs/board", "  ./board.yaml  "],
    )
    def test_paths(self, source):
        """Test file names and strings with separators are paths."""
        assert looks_like_path(source)

    @pytest.mark.parametrize(
        "source",
        ["board: X\ncolumns: []\n", "board", "", "a.yaml\n"],
    )
    def test_content(self, source):
        """Test multi-line text and bare words are content."""
        assert not looks_like_path(source)


class TestParseBoard:
    """Tests for parse_board() with files and raw content."""

    def test_reads_file_from_string_path(self, board_file):
        """Test a .yaml string is read from disk."""
        board = parse_board(str(board_file))
        assert board.name == "Payments"

    def test_reads_file_from_path_object(self, tmp_path, valid_board_yaml):
        """Test Path objects are always read from disk, whatever the suffix."""
        path = tmp_path / "board.txt"
        path.write_text(valid_board_yaml)

        assert parse_board(path).name == "Payments"

    def test_parses_raw_content(self, valid_board_yaml):
        """Test multi-line strings are parsed as YAML."""
        assert parse_board(valid_board_yaml).name == "Payments"

    def test_missing_file_raises_read_error(self, tmp_path):
        """Test a missing file is a BoardReadError, not a content error."""
        missing = tmp_path / "nope.yaml"

        with pytest.raises(BoardReadError) as exc_info:
            parse_board(str(missing))

        assert exc_info.value.path == missing.resolve()
        assert str(exc_info.value).startswith(f'Cannot read file "{missing.resolve()}"')

    def test_read_error_is_a_parse_error(self, tmp_path):
        """Test callers catching ParseError also see read failures."""
        with pytest.raises(ParseError):
            parse_board(tmp_path / "nope.yaml")

    def test_directory_raises_read_error(self, tmp_path):
        """Test a directory path is reported as unreadable."""
        with pytest.raises(BoardReadError):
            parse_board(Path(tmp_path))

    def test_invalid_utf8_raises_read_error(self, tmp_path):
        """Test non UTF-8 bytes are reported as unreadable."""
        path = tmp_path / "board.yaml"
        path.write_bytes(b"board: \xff\xfe\n")

        with pytest.raises(BoardReadError, match="UTF-8"):
            parse_board(path)
