"""Helpers for CLI output."""

from .output import (
    get_console,
    print_error_message,
    print_list_item,
    print_success_message,
    print_warning_message,
)


__all__ = [
    "get_console",
    "print_error_message",
    "print_list_item",
    "print_success_message",
    "print_warning_message",
]
