"""Formatters turning keymap data into DeviceTree tokens."""

from .behavior_formatter import (
    BEHAVIORS,
    format_binding,
    get_all_behaviors,
    get_behavior,
    get_behavior_code,
    get_param_count,
    is_layer_behavior,
)


__all__ = [
    "BEHAVIORS",
    "format_binding",
    "get_all_behaviors",
    "get_behavior",
    "get_behavior_code",
    "get_param_count",
    "is_layer_behavior",
]
