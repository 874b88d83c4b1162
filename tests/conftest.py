"""
Pytest configuration and shared fixtures.

Provides sample boards (as YAML text and as files), a project directory
helper and environment isolation used across the test suite.
"""

from pathlib import Path

import pytest

from statecraft.core.board import Board, parse_board_from_string

# ==============================================================================
# Sample Board YAML
# ==============================================================================

VALID_BOARD_YAML = """\
board: Payments
columns:
  - Backlog
  - Ready
  - name: In Progress
    limit: 2
  - Done
tasks:
  auth-login:
    title: Login form
    status: Done
  auth-session:
    title: Session refresh
    status: In Progress
    owner: sam
    priority: high
    depends_on: auth-login
  billing-export:
    title: CSV export
    status: Backlog
    depends_on:
      - auth-session
      - auth-login
"""

EMPTY_BOARD_YAML = """\
board: Empty
columns: [Backlog, Ready, In Progress, Done]
tasks: {}
"""


# ==============================================================================
# Environment Isolation
# ==============================================================================


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """
    Keep tests away from the real environment.

    Disables the update check, clears STATECRAFT_* overrides and points the
    user env file at an empty temp config directory.
    """
    monkeypatch.setenv("STATECRAFT_NO_UPDATE_CHECK", "1")
    monkeypatch.delenv("STATECRAFT_BOARD", raising=False)
    monkeypatch.delenv("STATECRAFT_PORT", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))


# ==============================================================================
# Board Fixtures
# ==============================================================================


@pytest.fixture
def valid_board_yaml() -> str:
    """YAML for a canonical board with dependencies and a WIP limit."""
    return VALID_BOARD_YAML


@pytest.fixture
def valid_board() -> Board:
    """Parsed canonical board."""
    return parse_board_from_string(VALID_BOARD_YAML)


@pytest.fixture
def empty_board() -> Board:
    """Parsed canonical board with no tasks."""
    return parse_board_from_string(EMPTY_BOARD_YAML)


@pytest.fixture
def project_dir(tmp_path, monkeypatch) -> Path:
    """Provide an empty project directory and make it the working directory."""
    project = tmp_path / "project"
    project.mkdir()
    monkeypatch.chdir(project)
    return project


@pytest.fixture
def board_file(project_dir) -> Path:
    """A valid board.yaml inside the project directory."""
    path = project_dir / "board.yaml"
    path.write_text(VALID_BOARD_YAML)
    return path
