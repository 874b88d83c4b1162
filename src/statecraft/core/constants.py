"""Shared defaults for the CLI, render server and scaffolding."""

# Board file used when no path is given and nothing is configured
DEFAULT_BOARD_PATH = "./board.yaml"

# Render server
DEFAULT_RENDER_PORT = 3000
RENDER_WATCH_DEBOUNCE_SECONDS = 0.1
RENDER_WATCH_POLL_SECONDS = 0.25

# Values offered by `statecraft init`
INIT_DEFAULT_BOARD_PATH = "board.yaml"
INIT_DEFAULT_TASKS_DIR = "tasks"
INIT_STRICT_MODE_DEFAULT = True
INIT_REQUIRE_SPEC_FILE_DEFAULT = False
INIT_INCLUDE_TASK_SPEC_FORMAT_DEFAULT = True

# Project config written by init/sync
CONFIG_FILENAME = ".statecraft.json"

# Environment overrides
ENV_BOARD = "STATECRAFT_BOARD"
ENV_PORT = "STATECRAFT_PORT"
ENV_NO_UPDATE_CHECK = "STATECRAFT_NO_UPDATE_CHECK"

# Board format document shipped in statecraft/templates
FORMAT_DOC_FILENAME = "board-format.md"
