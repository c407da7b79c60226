"""Helper functions for CLI output formatting with Rich integration.

Status output goes to stderr so that ``export --stdout`` can be piped.
"""

from rich.console import Console
from rich.markup import escape
from rich.theme import Theme


class Colors:
    """Standardized color palette for CLI output."""

    SUCCESS = "bold green"
    ERROR = "bold red"
    WARNING = "bold yellow"
    PRIMARY = "cyan"
    MUTED = "dim"
    HEADER = "bold cyan"


class Icons:
    """Standardized icons for different message types."""

    CHECKMARK = "✓"
    CROSS = "✗"
    WARNING = "!"
    BULLET = "•"


THEME = Theme(
    {
        "success": Colors.SUCCESS,
        "error": Colors.ERROR,
        "warning": Colors.WARNING,
        "primary": Colors.PRIMARY,
        "muted": Colors.MUTED,
        "header": Colors.HEADER,
    }
)


def get_console(stderr: bool = False) -> Console:
    """Create a themed console bound to the current stdout/stderr."""
    return Console(theme=THEME, stderr=stderr, highlight=False)


def print_success_message(message: str) -> None:
    """Print a success message with a checkmark."""
    get_console(stderr=True).print(
        f"[success]{Icons.CHECKMARK}[/success] {escape(message)}",
        soft_wrap=True,
    )


def print_error_message(message: str) -> None:
    """Print an error message with an X symbol."""
    get_console(stderr=True).print(
        f"[error]{Icons.CROSS}[/error] {escape(message)}",
        soft_wrap=True,
    )


def print_warning_message(message: str) -> None:
    """Print a warning message."""
    get_console(stderr=True).print(
        f"[warning]{Icons.WARNING}[/warning] {escape(message)}",
        soft_wrap=True,
    )


def print_list_item(item: str, indent: int = 1) -> None:
    """Print a list item with bullet and indentation."""
    get_console(stderr=True).print(
        f"{' ' * (indent * 2)}{Icons.BULLET} {escape(item)}",
        soft_wrap=True,
    )
