"""Exception hierarchy for zmk-export.

The generation pipeline itself never raises for unresolved data; these errors
are raised at the edges (reading input files, loading settings and usage
tables, writing output).
"""

from typing import Any


class ZmkExportError(Exception):
    """Base class for all zmk-export errors."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.context = context

    def __str__(self) -> str:
        message = super().__str__()
        if not self.context:
            return message
        details = ", ".join(f"{key}={value}" for key, value in self.context.items())
        return f"{message} ({details})"


class KeymapError(ZmkExportError):
    """Keymap input could not be read or validated."""


class ConfigError(ZmkExportError):
    """Settings could not be loaded."""


class UsageTableError(ZmkExportError):
    """A HID usage label file is malformed."""


class ExportError(ZmkExportError):
    """The generated keymap could not be written."""


__all__ = [
    "ConfigError",
    "ExportError",
    "KeymapError",
    "UsageTableError",
    "ZmkExportError",
]
