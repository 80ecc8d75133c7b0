#!/usr/bin/env python3
"""
Notes CLI.

Usage:
    python cli.py --help                          # Show help

    # Server
    python cli.py server start                    # Start the notes API
    python cli.py server start --reload           # Start with auto-reload

    # Health checks
    python cli.py health ping                     # Liveness
    python cli.py health status                   # Readiness (database)

    # Notes
    python cli.py notes list                      # Pinned first, newest first
    python cli.py notes search groceries          # Title and text search
    python cli.py notes new --template goal-tracker
    python cli.py notes edit <note-id>            # Line editor with autosave

Options:
    --verbose, -v     Enable verbose output
    --debug, -d       Enable debug mode (detailed logging)
    --help            Show help message
"""

import sys
from pathlib import Path

import typer
from rich.console import Console

# Add project root to path for absolute imports
project_root = Path(__file__).resolve().parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from modules.cli.commands import health_app, notes_app, server_app  # noqa: E402

console = Console()

app = typer.Typer(
    name="cli",
    help="Notes CLI - server management, health checks and note editing.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(server_app, name="server")
app.add_typer(health_app, name="health")
app.add_typer(notes_app, name="notes")


def _validate_project_root() -> None:
    """Validate that we're running from the project root."""
    if not (project_root / ".project_root").exists():
        console.print("[red]Error: .project_root not found. Run from project root.[/red]")
        raise typer.Exit(1)


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose output (INFO level logging)",
    ),
    debug: bool = typer.Option(
        False, "--debug", "-d", help="Enable debug mode (DEBUG level logging)",
    ),
) -> None:
    """
    Notes CLI.

    Built with Typer for commands and Rich for formatted output.
    """
    _validate_project_root()

    from modules.backend.core.logging import setup_logging

    if debug:
        setup_logging(level="DEBUG", format_type="console")
        console.print("[dim]Debug mode enabled[/dim]")
    elif verbose:
        setup_logging(level="INFO", format_type="console")
    else:
        setup_logging(level="WARNING", format_type="console", enable_file_logging=False)


if __name__ == "__main__":
    app()
