"""zmk-export - export keymaps read from ZMK keyboards to .keymap files."""

from importlib.metadata import distribution

from .core.logging import configure_library_logging


# Before any module-level logger is used
configure_library_logging()

from .models import Behavior, Binding, Keymap, Layer
from .models.results import ExportResult


__version__ = distribution("zmk-keymap-export").version

__all__ = [
    "Behavior",
    "Binding",
    "ExportResult",
    "Keymap",
    "Layer",
    "__version__",
]

# Import CLI after setting __version__ to avoid circular imports
from .cli import app, main


__all__ += ["app", "main"]
