"""HID usage tables and key-name resolution."""

from .resolver import (
    KEY_NAME_OVERRIDES,
    MODIFIER_NAMES,
    categorize,
    is_modifier_usage,
    make_key_name_resolver,
    resolve_key_code,
    resolve_symbolic_name,
)
from .usage_tables import (
    DEFAULT_USAGE_TABLE,
    HID_PAGE_CONSUMER,
    HID_PAGE_GENERIC_DESKTOP,
    HID_PAGE_KEYBOARD,
    HidUsageTable,
    decode_usage,
    hid_usage,
)


__all__ = [
    "DEFAULT_USAGE_TABLE",
    "HID_PAGE_CONSUMER",
    "HID_PAGE_GENERIC_DESKTOP",
    "HID_PAGE_KEYBOARD",
    "KEY_NAME_OVERRIDES",
    "MODIFIER_NAMES",
    "HidUsageTable",
    "categorize",
    "decode_usage",
    "hid_usage",
    "is_modifier_usage",
    "make_key_name_resolver",
    "resolve_key_code",
    "resolve_symbolic_name",
]
