"""Services package for keymap export operations."""

from .keymap_export_service import KeymapExportService, create_keymap_export_service


__all__ = [
    "KeymapExportService",
    "create_keymap_export_service",
]
