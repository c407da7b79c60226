"""Main CLI application for zmk-export."""

import logging
from pathlib import Path
from typing import Annotated

import typer

from zmk_export import __version__
from zmk_export.cli.decorators.error_handling import print_stack_trace_if_verbose
from zmk_export.cli.helpers.output import print_error_message
from zmk_export.config.settings import ExportSettings, load_settings
from zmk_export.core.errors import ConfigError
from zmk_export.core.logging import log_level_from_name, setup_logging


__all__ = ["AppContext", "app", "main"]

logger = logging.getLogger(__name__)


class AppContext:
    """Application context shared with subcommands through ``ctx.obj``."""

    def __init__(
        self,
        settings: ExportSettings,
        verbose: int = 0,
        log_file: str | None = None,
    ) -> None:
        self.settings = settings
        self.verbose = verbose
        self.log_file = log_file


app = typer.Typer(
    name="zmk-export",
    help=f"""Export a keymap read from a ZMK keyboard to DeviceTree source. v{__version__}

The keymap file is the JSON (or YAML) dump of the layers, bindings and
device metadata; the output is a .keymap file ready for a zmk-config repo.

Common workflows:
  • Export:    zmk-export export keymap.json -o config/corne.keymap
  • Check:     zmk-export validate keymap.json
  • Inspect:   zmk-export behaviors / zmk-export usage 0x070004""",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _version_callback(value: bool) -> None:
    if value:
        print(f"zmk-export v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "-v",
            "--verbose",
            count=True,
            help="Increase verbosity (-v=INFO, -vv=DEBUG)",
        ),
    ] = 0,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Enable debug logging (equivalent to -vv)"),
    ] = False,
    log_file: Annotated[
        str | None, typer.Option("--log-file", help="Log to file")
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("-c", "--config", help="Path to configuration file"),
    ] = None,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            help="Show version and exit",
            callback=_version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """zmk-export: ZMK keymap exporter."""
    try:
        settings = load_settings(config_file)
    except ConfigError as e:
        print_error_message(str(e))
        print_stack_trace_if_verbose()
        raise typer.Exit(1) from e

    if debug or verbose >= 2:
        log_level = logging.DEBUG
    elif verbose == 1:
        log_level = logging.INFO
    else:
        log_level = log_level_from_name(settings.log_level)

    setup_logging(log_level=log_level, log_file=log_file)
    logger.debug("Logging configured at %s", logging.getLevelName(log_level))

    ctx.obj = AppContext(settings=settings, verbose=verbose, log_file=log_file)


def register_commands() -> None:
    """Register all subcommands with the main app."""
    from zmk_export.cli.commands import register_all_commands

    register_all_commands(app)


register_commands()


def main() -> int:
    """Main CLI entry point."""
    try:
        app()
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 0
    return 0
