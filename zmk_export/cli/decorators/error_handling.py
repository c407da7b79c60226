"""Error handling decorators for CLI commands."""

import logging
import sys
import traceback
from collections.abc import Callable
from functools import wraps
from typing import Any

import click
import typer

from zmk_export.cli.helpers.output import print_error_message
from zmk_export.core.errors import (
    ConfigError,
    ExportError,
    KeymapError,
    UsageTableError,
)
from zmk_export.core.structlog_logger import get_struct_logger


__all__ = ["handle_errors", "print_stack_trace_if_verbose"]

logger = get_struct_logger(__name__)


def handle_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator to handle common exceptions in CLI commands.

    Known errors are logged, reported to the user and turned into exit code 1.

    Args:
        func: The function to decorate

    Returns:
        Decorated function with error handling
    """

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except KeymapError as e:
            logger.error("keymap_error", error=str(e))
            print_error_message(str(e))
            print_stack_trace_if_verbose()
            raise typer.Exit(1) from e
        except ConfigError as e:
            logger.error("configuration_error", error=str(e))
            print_error_message(str(e))
            print_stack_trace_if_verbose()
            raise typer.Exit(1) from e
        except UsageTableError as e:
            logger.error("usage_table_error", error=str(e))
            print_error_message(str(e))
            print_stack_trace_if_verbose()
            raise typer.Exit(1) from e
        except ExportError as e:
            logger.error("export_error", error=str(e))
            print_error_message(str(e))
            print_stack_trace_if_verbose()
            raise typer.Exit(1) from e
        except (typer.Exit, typer.Abort, click.ClickException):
            raise
        except Exception as e:
            exc_info = logger.isEnabledFor(logging.DEBUG)
            logger.error("unexpected_error", error=str(e), exc_info=exc_info)
            print_error_message(f"Unexpected error: {e}")
            print_stack_trace_if_verbose()
            raise typer.Exit(1) from e

    return wrapper


def print_stack_trace_if_verbose() -> None:
    """Print stack trace if verbose/debug mode is enabled."""
    if any(arg in sys.argv for arg in ["-vv", "--debug"]):
        print("\nStack trace:", file=sys.stderr)
        traceback.print_exc(file=sys.stderr)
