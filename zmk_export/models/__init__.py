"""Data models for keymap export."""

from .base import ExportBaseModel
from .behavior import Behavior
from .keymap import (
    Binding,
    ExportMetadata,
    KeyCategory,
    KeyCode,
    Keymap,
    Layer,
    format_timestamp,
)
from .results import BaseResult, ExportResult


__all__ = [
    "BaseResult",
    "Behavior",
    "Binding",
    "ExportBaseModel",
    "ExportMetadata",
    "ExportResult",
    "KeyCategory",
    "KeyCode",
    "Keymap",
    "Layer",
    "format_timestamp",
]
