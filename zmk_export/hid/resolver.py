"""Resolve HID usage codes into ZMK key names.

A usage code is ``(page << 16) | id``. Only the Keyboard and Consumer pages
map to ZMK key names. Every function here is total: unknown or malformed
input yields ``None`` (or ``False``), never an exception.
"""

import re
from functools import partial
from types import MappingProxyType

from zmk_export.core.structlog_logger import get_struct_logger
from zmk_export.models.keymap import KeyCategory, KeyCode
from zmk_export.protocols.usage_protocols import KeyNameResolver, UsageTableProtocol

from .usage_tables import DEFAULT_USAGE_TABLE, HID_PAGE_CONSUMER, HID_PAGE_KEYBOARD


logger = get_struct_logger(__name__)

MODIFIER_USAGE_FIRST = 0xE0
MODIFIER_USAGE_LAST = 0xE7

# Indexed by usage id - 0xE0. The usage table gives both sides the same label.
MODIFIER_NAMES: tuple[str, ...] = (
    "LCTRL",
    "LSHFT",
    "LALT",
    "LGUI",
    "RCTRL",
    "RSHFT",
    "RALT",
    "RGUI",
)

KEY_NAME_OVERRIDES = MappingProxyType(
    {
        # Number row
        "1 and !": "N1",
        "2 and @": "N2",
        "3 and #": "N3",
        "4 and $": "N4",
        "5 and %": "N5",
        "6 and ^": "N6",
        "7 and &": "N7",
        "8 and *": "N8",
        "9 and (": "N9",
        "0 and )": "N0",
        # Editing and whitespace
        "Spacebar": "SPACE",
        "Keyboard Return (ENTER)": "ENTER",
        "Keyboard Escape": "ESC",
        "Keyboard Delete (Backspace)": "BSPC",
        "Keyboard Tab": "TAB",
        "Keyboard Caps Lock": "CAPS",
        # Arrows
        "Keyboard Right Arrow": "RIGHT",
        "Keyboard Left Arrow": "LEFT",
        "Keyboard Down Arrow": "DOWN",
        "Keyboard Up Arrow": "UP",
        # Function keys
        "Keyboard F1": "F1",
        "Keyboard F2": "F2",
        "Keyboard F3": "F3",
        "Keyboard F4": "F4",
        "Keyboard F5": "F5",
        "Keyboard F6": "F6",
        "Keyboard F7": "F7",
        "Keyboard F8": "F8",
        "Keyboard F9": "F9",
        "Keyboard F10": "F10",
        "Keyboard F11": "F11",
        "Keyboard F12": "F12",
        # Navigation
        "Keyboard Home": "HOME",
        "Keyboard End": "END",
        "Keyboard Page Up": "PG_UP",
        "Keyboard Page Down": "PG_DN",
        "Keyboard Insert": "INS",
        "Keyboard Delete Forward": "DEL",
        "Keyboard PrintScreen": "PSCRN",
        "Keyboard Scroll Lock": "SLCK",
        "Keyboard Pause": "PAUSE_BREAK",
        "Keyboard Application": "K_APP",
        "Keyboard Mute": "K_MUTE",
        "Keyboard Volume Up": "K_VOL_UP",
        "Keyboard Volume Down": "K_VOL_DN",
        # Punctuation
        "- and _": "MINUS",
        "= and +": "EQUAL",
        "[ and {": "LBKT",
        "] and }": "RBKT",
        "\\ and |": "BSLH",
        "; and :": "SEMI",
        "' and \"": "SQT",
        "` and ~": "GRAVE",
        ", and <": "COMMA",
        ". and >": "DOT",
        "/ and ?": "FSLH",
        "Keyboard Non-US # and ~": "NON_US_HASH",
        "Keyboard Non-US \\ and |": "NON_US_BSLH",
        # Keypad
        "Keypad Num Lock and Clear": "KP_NUM",
        "Keypad /": "KP_SLASH",
        "Keypad *": "KP_MULTIPLY",
        "Keypad -": "KP_MINUS",
        "Keypad +": "KP_PLUS",
        "Keypad ENTER": "KP_ENTER",
        "Keypad 1 and End": "KP_N1",
        "Keypad 2 and Down Arrow": "KP_N2",
        "Keypad 3 and PageDn": "KP_N3",
        "Keypad 4 and Left Arrow": "KP_N4",
        "Keypad 5": "KP_N5",
        "Keypad 6 and Right Arrow": "KP_N6",
        "Keypad 7 and Home": "KP_N7",
        "Keypad 8 and Up Arrow": "KP_N8",
        "Keypad 9 and PageUp": "KP_N9",
        "Keypad 0 and Insert": "KP_N0",
        "Keypad . and Delete": "KP_DOT",
        "Keypad =": "KP_EQUAL",
        # Consumer page
        "Play/Pause": "C_PP",
        "Scan Next Track": "C_NEXT",
        "Scan Previous Track": "C_PREV",
        "Stop": "C_STOP",
        "Mute": "C_MUTE",
        "Volume Increment": "C_VOL_UP",
        "Volume Decrement": "C_VOL_DN",
        "Display Brightness Increment": "C_BRI_UP",
        "Display Brightness Decrement": "C_BRI_DN",
    }
)

_SINGLE_LETTER = re.compile(r"^[A-Z]$")
_NUMBER_KEY = re.compile(r"^N[0-9]$")
_FUNCTION_KEY = re.compile(r"^F[0-9]+$")
_NON_ALPHANUMERIC_RUN = re.compile(r"[^A-Za-z0-9]+")
_KEYBOARD_PREFIX = "Keyboard "


def resolve_symbolic_name(
    usage_code: int, usage_table: UsageTableProtocol = DEFAULT_USAGE_TABLE
) -> str | None:
    """Get the ZMK key name of a usage code.

    Args:
        usage_code: HID usage code, ``(page << 16) | id``
        usage_table: Usage-name database to query for labels

    Returns:
        Key name such as ``"A"``, ``"N1"`` or ``"LCTRL"``, or None when the
        usage is on another page, has no label, or yields no usable name
    """
    page, usage_id = usage_table.decode(usage_code)

    if page not in (HID_PAGE_KEYBOARD, HID_PAGE_CONSUMER):
        return None

    if (
        page == HID_PAGE_KEYBOARD
        and MODIFIER_USAGE_FIRST <= usage_id <= MODIFIER_USAGE_LAST
    ):
        return MODIFIER_NAMES[usage_id - MODIFIER_USAGE_FIRST]

    label = usage_table.get_label(page, usage_id)
    if not label:
        return None

    override = KEY_NAME_OVERRIDES.get(label)
    if override:
        return override

    if _SINGLE_LETTER.match(label):
        return label

    if label.startswith(_KEYBOARD_PREFIX):
        label = label[len(_KEYBOARD_PREFIX) :]

    name = _NON_ALPHANUMERIC_RUN.sub("_", label).strip("_").upper()
    if not name:
        logger.debug("usage_label_unrepresentable", page=page, usage_id=usage_id)
        return None
    return name


def resolve_key_code(
    usage_code: int, usage_table: UsageTableProtocol = DEFAULT_USAGE_TABLE
) -> KeyCode | None:
    """Get the full key-code record of a usage code, or None if unresolvable."""
    zmk_name = resolve_symbolic_name(usage_code, usage_table)
    if zmk_name is None:
        return None

    page, usage_id = usage_table.decode(usage_code)
    return KeyCode(
        hid_usage=usage_code,
        zmk_name=zmk_name,
        label=usage_table.get_label(page, usage_id) or "",
        category=categorize(zmk_name),
    )


def is_modifier_usage(
    usage_code: int, usage_table: UsageTableProtocol = DEFAULT_USAGE_TABLE
) -> bool:
    """Check whether a usage code is one of the eight modifier keys."""
    return resolve_symbolic_name(usage_code, usage_table) in MODIFIER_NAMES


def categorize(symbolic_name: str) -> KeyCategory:
    """Classify a ZMK key name."""
    if _SINGLE_LETTER.match(symbolic_name):
        return KeyCategory.LETTER
    if _NUMBER_KEY.match(symbolic_name):
        return KeyCategory.NUMBER
    if _FUNCTION_KEY.match(symbolic_name):
        return KeyCategory.FUNCTION
    if symbolic_name in MODIFIER_NAMES:
        return KeyCategory.MODIFIER
    return KeyCategory.SPECIAL


def make_key_name_resolver(usage_table: UsageTableProtocol) -> KeyNameResolver:
    """Bind a usage table to ``resolve_symbolic_name`` for injection into formatters."""
    return partial(resolve_symbolic_name, usage_table=usage_table)
