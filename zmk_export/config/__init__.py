"""Configuration for keymap export."""

from .formatting import DEFAULT_FORMATTING, KeymapFormatting
from .settings import ExportSettings, default_config_path, load_settings


__all__ = [
    "DEFAULT_FORMATTING",
    "ExportSettings",
    "KeymapFormatting",
    "default_config_path",
    "load_settings",
]
