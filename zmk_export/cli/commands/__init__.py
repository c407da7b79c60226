"""CLI command registration."""

import typer

from .export import register_commands as register_export_commands
from .inspect import register_commands as register_inspect_commands


def register_all_commands(app: typer.Typer) -> None:
    """Register all CLI commands with the main app.

    Args:
        app: The main Typer app
    """
    register_export_commands(app)
    register_inspect_commands(app)


__all__ = ["register_all_commands"]
