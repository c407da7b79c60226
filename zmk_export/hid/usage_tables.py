"""HID usage-name database.

Labels follow the naming of the keyboard's own usage tables: single letters
for A-Z, ``"1 and !"`` style names for the digit and punctuation row and
``"Keyboard ..."`` names for most other keys. The resolver maps these labels
to ZMK key names; this module only stores and looks them up.
"""

import json
from collections.abc import Iterator, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from zmk_export.core.errors import UsageTableError
from zmk_export.core.structlog_logger import get_struct_logger


logger = get_struct_logger(__name__)

HID_PAGE_GENERIC_DESKTOP = 0x01
HID_PAGE_KEYBOARD = 0x07
HID_PAGE_CONSUMER = 0x0C

_USAGE_MASK = 0xFFFF


def hid_usage(page: int, usage_id: int) -> int:
    """Compose a usage code from a 16-bit page and a 16-bit id."""
    return ((page & _USAGE_MASK) << 16) | (usage_id & _USAGE_MASK)


def decode_usage(usage_code: int) -> tuple[int, int]:
    """Split a usage code into ``(page, id)``."""
    return (usage_code >> 16) & _USAGE_MASK, usage_code & _USAGE_MASK


def _keyboard_labels() -> dict[int, str]:
    labels: dict[int, str] = {}

    for offset in range(26):
        labels[0x04 + offset] = chr(ord("A") + offset)

    for offset, label in enumerate(
        [
            "1 and !",
            "2 and @",
            "3 and #",
            "4 and $",
            "5 and %",
            "6 and ^",
            "7 and &",
            "8 and *",
            "9 and (",
            "0 and )",
        ]
    ):
        labels[0x1E + offset] = label

    labels.update(
        {
            0x28: "Keyboard Return (ENTER)",
            0x29: "Keyboard Escape",
            0x2A: "Keyboard Delete (Backspace)",
            0x2B: "Keyboard Tab",
            0x2C: "Spacebar",
            0x2D: "- and _",
            0x2E: "= and +",
            0x2F: "[ and {",
            0x30: "] and }",
            0x31: "\\ and |",
            0x32: "Keyboard Non-US # and ~",
            0x33: "; and :",
            0x34: "' and \"",
            0x35: "` and ~",
            0x36: ", and <",
            0x37: ". and >",
            0x38: "/ and ?",
            0x39: "Keyboard Caps Lock",
            0x46: "Keyboard PrintScreen",
            0x47: "Keyboard Scroll Lock",
            0x48: "Keyboard Pause",
            0x49: "Keyboard Insert",
            0x4A: "Keyboard Home",
            0x4B: "Keyboard Page Up",
            0x4C: "Keyboard Delete Forward",
            0x4D: "Keyboard End",
            0x4E: "Keyboard Page Down",
            0x4F: "Keyboard Right Arrow",
            0x50: "Keyboard Left Arrow",
            0x51: "Keyboard Down Arrow",
            0x52: "Keyboard Up Arrow",
            0x53: "Keypad Num Lock and Clear",
            0x54: "Keypad /",
            0x55: "Keypad *",
            0x56: "Keypad -",
            0x57: "Keypad +",
            0x58: "Keypad ENTER",
            0x59: "Keypad 1 and End",
            0x5A: "Keypad 2 and Down Arrow",
            0x5B: "Keypad 3 and PageDn",
            0x5C: "Keypad 4 and Left Arrow",
            0x5D: "Keypad 5",
            0x5E: "Keypad 6 and Right Arrow",
            0x5F: "Keypad 7 and Home",
            0x60: "Keypad 8 and Up Arrow",
            0x61: "Keypad 9 and PageUp",
            0x62: "Keypad 0 and Insert",
            0x63: "Keypad . and Delete",
            0x64: "Keyboard Non-US \\ and |",
            0x65: "Keyboard Application",
            0x66: "Keyboard Power",
            0x67: "Keypad =",
            0x74: "Keyboard Execute",
            0x75: "Keyboard Help",
            0x76: "Keyboard Menu",
            0x77: "Keyboard Select",
            0x78: "Keyboard Stop",
            0x79: "Keyboard Again",
            0x7A: "Keyboard Undo",
            0x7B: "Keyboard Cut",
            0x7C: "Keyboard Copy",
            0x7D: "Keyboard Paste",
            0x7E: "Keyboard Find",
            0x7F: "Keyboard Mute",
            0x80: "Keyboard Volume Up",
            0x81: "Keyboard Volume Down",
            0x9A: "Keyboard SysReq/Attention",
        }
    )

    for offset in range(12):
        labels[0x3A + offset] = f"Keyboard F{offset + 1}"
        labels[0x68 + offset] = f"Keyboard F{offset + 13}"

    # Left and right modifiers share their human labels per kind
    for base in (0xE0, 0xE4):
        labels[base] = "Keyboard Control"
        labels[base + 1] = "Keyboard Shift"
        labels[base + 2] = "Keyboard Alt"
        labels[base + 3] = "Keyboard GUI"

    return labels


_CONSUMER_LABELS: dict[int, str] = {
    0x30: "Power",
    0x32: "Sleep",
    0x6F: "Display Brightness Increment",
    0x70: "Display Brightness Decrement",
    0xB0: "Play",
    0xB1: "Pause",
    0xB2: "Record",
    0xB3: "Fast Forward",
    0xB4: "Rewind",
    0xB5: "Scan Next Track",
    0xB6: "Scan Previous Track",
    0xB7: "Stop",
    0xB8: "Eject",
    0xCD: "Play/Pause",
    0xE2: "Mute",
    0xE9: "Volume Increment",
    0xEA: "Volume Decrement",
    0x183: "AL Consumer Control Configuration",
    0x192: "AL Calculator",
    0x194: "AL Local Machine Browser",
    0x221: "AC Search",
    0x223: "AC Home",
    0x224: "AC Back",
    0x225: "AC Forward",
    0x227: "AC Refresh",
}

_GENERIC_DESKTOP_LABELS: dict[int, str] = {
    0x01: "Pointer",
    0x02: "Mouse",
    0x06: "Keyboard",
    0x07: "Keypad",
    0x81: "System Power Down",
    0x82: "System Sleep",
    0x83: "System Wake Up",
}


class HidUsageTable:
    """Read-only usage-name database keyed by page and usage id."""

    def __init__(self, labels: Mapping[int, Mapping[int, str]]) -> None:
        self._labels: Mapping[int, Mapping[int, str]] = MappingProxyType(
            {page: MappingProxyType(dict(ids)) for page, ids in labels.items()}
        )

    def decode(self, usage_code: int) -> tuple[int, int]:
        """Split a usage code into its (page, id) pair."""
        return decode_usage(usage_code)

    def get_label(self, page: int, usage_id: int) -> str | None:
        """Get the label of a usage, or None when the table has none."""
        page_labels = self._labels.get(page)
        if page_labels is None:
            return None
        return page_labels.get(usage_id)

    def pages(self) -> list[int]:
        """Usage pages present in the table, ascending."""
        return sorted(self._labels)

    def __iter__(self) -> Iterator[tuple[int, int, str]]:
        for page in self.pages():
            for usage_id in sorted(self._labels[page]):
                yield page, usage_id, self._labels[page][usage_id]

    def __len__(self) -> int:
        return sum(len(ids) for ids in self._labels.values())

    def to_mapping(self) -> dict[int, dict[int, str]]:
        """Copy of the labels as plain nested dicts."""
        return {page: dict(ids) for page, ids in self._labels.items()}

    def with_labels(self, extra: Mapping[int, Mapping[int, str]]) -> "HidUsageTable":
        """Return a new table with ``extra`` labels layered over this one."""
        merged = self.to_mapping()
        for page, ids in extra.items():
            merged.setdefault(page, {}).update(ids)
        return HidUsageTable(merged)

    @classmethod
    def from_mapping(cls, data: Mapping[Any, Any]) -> "HidUsageTable":
        """Build a table from ``{page: {id: label}}`` with int or hex-string keys."""
        labels: dict[int, dict[int, str]] = {}
        for raw_page, raw_ids in data.items():
            page = _parse_usage_number(raw_page, "page")
            if not isinstance(raw_ids, Mapping):
                raise UsageTableError(
                    "Usage page entry must be a mapping of ids to labels",
                    page=raw_page,
                )
            page_labels = labels.setdefault(page, {})
            for raw_id, label in raw_ids.items():
                if not isinstance(label, str) or not label:
                    raise UsageTableError(
                        "Usage label must be a non-empty string",
                        page=raw_page,
                        usage_id=raw_id,
                    )
                page_labels[_parse_usage_number(raw_id, "usage id")] = label
        return cls(labels)

    @classmethod
    def from_file(cls, path: Path) -> "HidUsageTable":
        """Load labels from a YAML or JSON file."""
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise UsageTableError(
                "Cannot read usage label file", path=str(path)
            ) from e

        try:
            if path.suffix.lower() == ".json":
                data = json.loads(text)
            else:
                data = yaml.safe_load(text)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise UsageTableError(
                "Usage label file is not valid JSON/YAML", path=str(path)
            ) from e

        if not isinstance(data, Mapping):
            raise UsageTableError(
                "Usage label file must contain a mapping of pages", path=str(path)
            )

        table = cls.from_mapping(data)
        logger.debug("usage_table_loaded", path=str(path), labels=len(table))
        return table


def _parse_usage_number(value: Any, what: str) -> int:
    if isinstance(value, bool):
        raise UsageTableError(f"Invalid {what}", value=value)
    if isinstance(value, int):
        number = value
    elif isinstance(value, str):
        try:
            number = int(value.strip(), 0)
        except ValueError as e:
            raise UsageTableError(f"Invalid {what}", value=value) from e
    else:
        raise UsageTableError(f"Invalid {what}", value=value)

    if not 0 <= number <= _USAGE_MASK:
        raise UsageTableError(f"{what.capitalize()} out of 16-bit range", value=value)
    return number


DEFAULT_USAGE_TABLE = HidUsageTable(
    {
        HID_PAGE_GENERIC_DESKTOP: _GENERIC_DESKTOP_LABELS,
        HID_PAGE_KEYBOARD: _keyboard_labels(),
        HID_PAGE_CONSUMER: _CONSUMER_LABELS,
    }
)
