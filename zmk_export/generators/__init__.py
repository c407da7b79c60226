"""Generators package for keymap text generation."""

from .keymap_generator import (
    IdentifierCase,
    generate,
    generate_footer,
    generate_includes,
    generate_keymap,
    generate_layer,
    generate_layer_constants,
    generate_metadata,
    identifier_from_label,
)


__all__ = [
    "IdentifierCase",
    "generate",
    "generate_footer",
    "generate_includes",
    "generate_keymap",
    "generate_layer",
    "generate_layer_constants",
    "generate_metadata",
    "identifier_from_label",
]
