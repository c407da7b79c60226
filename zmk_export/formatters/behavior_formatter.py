"""Behavior formatting for converting numeric bindings to DeviceTree references."""

from types import MappingProxyType
from typing import Any

from zmk_export.core.structlog_logger import get_struct_logger
from zmk_export.models.behavior import Behavior
from zmk_export.models.keymap import Binding
from zmk_export.protocols.usage_protocols import KeyNameResolver


logger = get_struct_logger(__name__)


# Behavior ids as reported by the keyboard. This numbering is an assumption
# that has not been validated against real firmware responses; correct the
# rows here if a device disagrees.
BEHAVIOR_DEFINITIONS: tuple[dict[str, Any], ...] = (
    {
        "id": 0,
        "code": "trans",
        "displayName": "Transparent",
        "paramCount": 0,
        "description": "Pass through to lower layer",
    },
    {
        "id": 1,
        "code": "kp",
        "displayName": "Key Press",
        "paramCount": 1,
        "description": "Basic key press",
    },
    {
        "id": 2,
        "code": "mt",
        "displayName": "Mod-Tap",
        "paramCount": 2,
        "description": "Modifier when held, key when tapped",
    },
    {
        "id": 3,
        "code": "lt",
        "displayName": "Layer-Tap",
        "paramCount": 2,
        "description": "Layer when held, key when tapped",
    },
    {
        "id": 4,
        "code": "mo",
        "displayName": "Momentary Layer",
        "paramCount": 1,
        "description": "Activate layer while held",
    },
    {
        "id": 5,
        "code": "tog",
        "displayName": "Toggle Layer",
        "paramCount": 1,
        "description": "Toggle layer on/off",
    },
    {
        "id": 6,
        "code": "bt",
        "displayName": "Bluetooth",
        "paramCount": 1,
        "description": "Bluetooth control",
    },
)

BEHAVIORS = MappingProxyType(
    {
        behavior.id: behavior
        for behavior in (Behavior.model_validate(row) for row in BEHAVIOR_DEFINITIONS)
    }
)

# Parameters of these behaviors are HID usage codes; others take plain numbers
KEY_PARAM_BEHAVIORS = frozenset({"kp", "mt"})
LAYER_BEHAVIORS = frozenset({"lt", "mo", "tog"})

MISSING_KEY_MARKER = "/* missing key */"
MISSING_PARAM2_MARKER = "/* missing param2 */"


def unknown_behavior_marker(behavior_id: int) -> str:
    """Inline comment standing in for an unregistered behavior."""
    return f"/* Unknown behavior {behavior_id} */"


def hid_usage_marker(usage_code: int) -> str:
    """Inline comment standing in for a usage code with no key name."""
    return f"/* HID 0x{usage_code:x} */"


def format_binding(binding: Binding, resolve_key_name: KeyNameResolver) -> str:
    """Format a binding as a DeviceTree behavior reference.

    Examples: ``&trans``, ``&kp A``, ``&mt LCTRL A``, ``&lt 1 TAB``,
    ``&mo 2``, ``&tog 1``, ``&bt 0``.

    Args:
        binding: Binding with behavior id and parameters
        resolve_key_name: Converts HID usage codes to ZMK key names

    Returns:
        Binding token; unresolvable parts are replaced by inline comments
    """
    behavior = BEHAVIORS.get(binding.behavior_id)

    if behavior is None:
        logger.warning(
            "unknown_behavior",
            behavior_id=binding.behavior_id,
            position=binding.position,
        )
        return unknown_behavior_marker(binding.behavior_id)

    if behavior.code == "trans":
        return "&trans"

    if behavior.param_count == 1:
        param = _format_param(binding.param1, behavior, resolve_key_name)
        return f"{behavior.reference} {param}"

    if behavior.param_count == 2:
        # Layer-tap: param1 is a layer index, param2 is the tapped key
        if behavior.code == "lt":
            if binding.param2 is None:
                key = MISSING_KEY_MARKER
            else:
                key = _resolve_key(binding.param2, resolve_key_name)
            return f"&lt {binding.param1} {key}"

        param1 = _format_param(binding.param1, behavior, resolve_key_name)
        if binding.param2 is None:
            param2 = MISSING_PARAM2_MARKER
        else:
            param2 = _format_param(binding.param2, behavior, resolve_key_name)
        return f"{behavior.reference} {param1} {param2}"

    return behavior.reference


def _format_param(
    value: int, behavior: Behavior, resolve_key_name: KeyNameResolver
) -> str:
    if behavior.code in KEY_PARAM_BEHAVIORS:
        return _resolve_key(value, resolve_key_name)
    # Layer indices and raw command codes
    return str(value)


def _resolve_key(usage_code: int, resolve_key_name: KeyNameResolver) -> str:
    key_name = resolve_key_name(usage_code)
    if key_name:
        return key_name
    logger.debug("usage_unresolved", usage=hex(usage_code))
    return hid_usage_marker(usage_code)


def get_behavior(behavior_id: int) -> Behavior | None:
    """Get behavior by id, or None if unknown."""
    return BEHAVIORS.get(behavior_id)


def get_behavior_code(behavior_id: int) -> str | None:
    """Get the behavior code (e.g. ``"kp"``), or None if unknown."""
    behavior = BEHAVIORS.get(behavior_id)
    return behavior.code if behavior else None


def get_param_count(behavior_id: int) -> int:
    """Number of parameters a behavior takes; 0 for unknown ids."""
    behavior = BEHAVIORS.get(behavior_id)
    return behavior.param_count if behavior else 0


def is_layer_behavior(behavior_id: int) -> bool:
    """Check whether a behavior takes a layer index as its first parameter."""
    behavior = BEHAVIORS.get(behavior_id)
    return behavior is not None and behavior.code in LAYER_BEHAVIORS


def get_all_behaviors() -> dict[int, Behavior]:
    """All known behaviors keyed by id, as a new dict on every call."""
    return dict(BEHAVIORS)
