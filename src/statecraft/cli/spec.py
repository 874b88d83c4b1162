"""
Statecraft CLI - Spec command.

Print the board format reference that ships with statecraft.
"""

from pathlib import Path

import typer

from statecraft.cli.errors import ExitCode, print_plain_error
from statecraft.core.constants import FORMAT_DOC_FILENAME

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"


def get_format_doc_path() -> Path:
    """Location of the bundled board format document."""
    return TEMPLATES_DIR / FORMAT_DOC_FILENAME


def spec() -> None:
    """
    Print the board file format reference.

    Useful for pasting into an AI assistant's context or piping to a pager.

    Examples:
        statecraft spec
        statecraft spec | less
    """
    doc_path = get_format_doc_path()
    try:
        content = doc_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        print_plain_error(f"statecraft spec: spec file not found at {doc_path}")
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    except OSError as e:
        print_plain_error(f"statecraft spec: {e}")
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    typer.echo(content, nl=not content.endswith("\n"))
