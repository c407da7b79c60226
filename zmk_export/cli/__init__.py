"""Command-line interface for zmk-export."""

from .app import app, main


__all__ = ["app", "main"]
