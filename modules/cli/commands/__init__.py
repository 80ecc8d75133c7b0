"""
CLI Commands.

Organized by domain/feature area.
"""

from modules.cli.commands.health import app as health_app
from modules.cli.commands.notes import app as notes_app
from modules.cli.commands.server import app as server_app

__all__ = [
    "health_app",
    "notes_app",
    "server_app",
]
