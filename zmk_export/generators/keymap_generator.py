"""Keymap text generation for creating ZMK .keymap files."""

import re
from collections.abc import Sequence
from enum import Enum

from zmk_export.config.formatting import DEFAULT_FORMATTING, KeymapFormatting
from zmk_export.core.structlog_logger import get_struct_logger
from zmk_export.formatters.behavior_formatter import format_binding
from zmk_export.hid.resolver import resolve_symbolic_name
from zmk_export.models.keymap import ExportMetadata, Keymap, Layer, format_timestamp
from zmk_export.protocols.usage_protocols import KeyNameResolver


logger = get_struct_logger(__name__)

INCLUDES: tuple[str, ...] = (
    "behaviors.dtsi",
    "dt-bindings/zmk/keys.h",
    "dt-bindings/zmk/bt.h",
)

UNSUPPORTED_FEATURES: tuple[str, ...] = (
    "Combos",
    "Macros",
    "Custom behaviors",
)

_NON_ALPHANUMERIC_RUN = re.compile(r"[^A-Za-z0-9]+")


class IdentifierCase(str, Enum):
    """Casing applied by ``identifier_from_label``."""

    UPPER = "upper"
    LOWER = "lower"


def identifier_from_label(label: str, casing: IdentifierCase) -> str:
    """Derive a C/DeviceTree identifier from a layer label.

    Runs of characters outside ``[A-Za-z0-9]`` collapse to one underscore and
    underscores at either end are dropped, so ``"Symbols & Numbers"`` becomes
    ``SYMBOLS_NUMBERS`` (upper) or ``symbols_numbers`` (lower).
    """
    identifier = _NON_ALPHANUMERIC_RUN.sub("_", label).strip("_")
    if casing is IdentifierCase.UPPER:
        return identifier.upper()
    return identifier.lower()


def _layer_identifier(layer: Layer, casing: IdentifierCase) -> str:
    identifier = identifier_from_label(layer.label, casing)
    if identifier:
        return identifier
    logger.warning("layer_label_not_an_identifier", layer_id=layer.id, label=layer.label)
    return identifier_from_label(f"layer_{layer.id}", casing)


def _comment_safe(text: str) -> str:
    # Keep user text from closing the surrounding /* */ block
    return text.replace("*/", "* /")


_DT_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\r": "\\r", "\t": "\\t"}


def _dt_string(text: str) -> str:
    escaped = []
    for char in text:
        if char in _DT_ESCAPES:
            escaped.append(_DT_ESCAPES[char])
        elif ord(char) < 0x20 or ord(char) == 0x7F:
            # Other control characters must not split the literal
            escaped.append(f"\\x{ord(char):02x}")
        else:
            escaped.append(char)
    return "".join(escaped)


def generate_metadata(
    metadata: ExportMetadata, formatting: KeymapFormatting | None = None
) -> str:
    """Generate the provenance comment block at the top of the file."""
    fmt = formatting or DEFAULT_FORMATTING
    lines = [
        "/*",
        " * ZMK keymap",
        f" * Exported from {_comment_safe(fmt.source_name)}",
        " *",
        f" * Date: {_comment_safe(metadata.timestamp)}",
        f" * Device: {_comment_safe(metadata.device_name)}",
        f" * Version: {_comment_safe(metadata.version)}",
        f" * Layers: {metadata.layer_count}",
        " */",
    ]
    return "\n".join(lines)


def generate_includes() -> str:
    """Generate the standard ZMK include directives."""
    return "\n".join(f"#include <{include}>" for include in INCLUDES)


def generate_layer_constants(layers: Sequence[Layer]) -> str:
    """Generate one ``#define`` per layer holding its index."""
    defines = [
        f"#define {_layer_identifier(layer, IdentifierCase.UPPER)} {index}"
        for index, layer in enumerate(layers)
    ]
    return "\n".join(defines)


def generate_layer(
    layer: Layer,
    resolve_key_name: KeyNameResolver | None = None,
    formatting: KeymapFormatting | None = None,
) -> str:
    """Generate a layer node with its bindings laid out in fixed-width rows.

    Args:
        layer: Layer to render
        resolve_key_name: Usage-code to key-name resolver, defaults to the
            built-in usage table
        formatting: Row width and indentation

    Returns:
        The layer node, indented for placement inside the keymap node
    """
    fmt = formatting or DEFAULT_FORMATTING
    resolver = resolve_key_name or resolve_symbolic_name
    node_indent = fmt.indent * 2
    property_indent = fmt.indent * 3
    row_indent = fmt.indent * 4

    tokens = [
        format_binding(binding, resolver) for binding in layer.sorted_bindings()
    ]
    rows = [
        fmt.key_gap.join(tokens[start : start + fmt.bindings_per_row])
        for start in range(0, len(tokens), fmt.bindings_per_row)
    ]

    node_name = f"{_layer_identifier(layer, IdentifierCase.LOWER)}_layer"
    logger.debug(
        "layer_generated", layer_id=layer.id, node=node_name, bindings=len(tokens)
    )

    lines = [
        f"{node_indent}{node_name} {{",
        f'{property_indent}label = "{_dt_string(layer.label)}";',
        f"{property_indent}bindings = <",
        *(f"{row_indent}{row}" for row in rows),
        f"{property_indent}>;",
        f"{node_indent}}};",
    ]
    return "\n".join(lines)


def generate_keymap(
    layers: Sequence[Layer],
    resolve_key_name: KeyNameResolver | None = None,
    formatting: KeymapFormatting | None = None,
) -> str:
    """Generate the root node holding the keymap and one child per layer."""
    fmt = formatting or DEFAULT_FORMATTING
    parts = [
        "/ {",
        f"{fmt.indent}keymap {{",
        f'{fmt.indent * 2}compatible = "zmk,keymap";',
    ]
    for layer in layers:
        parts.append("")
        parts.append(generate_layer(layer, resolve_key_name, fmt))
    parts.append(f"{fmt.indent}}};")
    parts.append("};")
    return "\n".join(parts)


def generate_footer() -> str:
    """Generate the closing comment listing what the export leaves out."""
    lines = [
        "/*",
        " * This export does not include:",
        *(f" * - {feature}" for feature in UNSUPPORTED_FEATURES),
        " *",
        " * To use this file:",
        " * 1. Copy it into your zmk-config repository as config/<keyboard>.keymap",
        " * 2. Re-create any combos, macros or custom behaviors by hand",
        ' * 3. Search for "Unknown behavior", "HID 0x" and "missing" comments',
        " *    and fix the bindings they flag",
        " * 4. Build the firmware as usual",
        " */",
    ]
    return "\n".join(lines)


def generate(
    keymap: Keymap,
    resolve_key_name: KeyNameResolver | None = None,
    formatting: KeymapFormatting | None = None,
) -> str:
    """Generate a complete .keymap document.

    Sections are metadata, includes, layer constants, the keymap node and the
    footer, separated by blank lines. The output only depends on its
    arguments, so the same keymap always yields the same text.
    """
    fmt = formatting or DEFAULT_FORMATTING
    metadata = ExportMetadata(
        timestamp=format_timestamp(keymap.timestamp),
        device_name=keymap.device_name,
        version=keymap.version,
        layer_count=len(keymap.layers),
    )

    sections = [
        generate_metadata(metadata, fmt),
        generate_includes(),
        generate_layer_constants(keymap.layers),
        generate_keymap(keymap.layers, resolve_key_name, fmt),
        generate_footer(),
    ]

    logger.info(
        "keymap_generated",
        device=keymap.device_name,
        layers=len(keymap.layers),
        bindings=keymap.total_bindings,
    )
    return "\n\n".join(section for section in sections if section) + "\n"
