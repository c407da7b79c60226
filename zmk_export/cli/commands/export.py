"""Export and validate commands."""

import sys
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer

from zmk_export.cli.decorators import handle_errors
from zmk_export.cli.helpers import (
    print_error_message,
    print_list_item,
    print_success_message,
    print_warning_message,
)
from zmk_export.services import KeymapExportService, create_keymap_export_service


if TYPE_CHECKING:
    from zmk_export.cli.app import AppContext


def _service_from_context(ctx: typer.Context) -> KeymapExportService:
    app_ctx: AppContext = ctx.obj
    return create_keymap_export_service(app_ctx.settings)


@handle_errors
def export_command(
    ctx: typer.Context,
    keymap_file: Annotated[
        Path, typer.Argument(help="Keymap JSON/YAML file read from the device")
    ],
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output .keymap file (default: input name with .keymap suffix)",
        ),
    ] = None,
    stdout: Annotated[
        bool, typer.Option("--stdout", help="Write the keymap to stdout instead")
    ] = False,
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Overwrite existing files")
    ] = False,
) -> None:
    """Export a keymap to a ZMK .keymap file."""
    service = _service_from_context(ctx)
    keymap = service.load_keymap(keymap_file)

    for issue in service.validate(keymap):
        print_warning_message(issue)

    if stdout:
        sys.stdout.write(service.render(keymap))
        return

    output_path = output or keymap_file.with_suffix(".keymap")
    result = service.export(keymap, output_path, force=force)

    if not result.success:
        print_error_message("Keymap export failed")
        for error in result.errors:
            print_list_item(error)
        raise typer.Exit(1)

    print_success_message(f"Keymap exported to {output_path}")
    print_list_item(f"Layers: {result.layer_count}")
    print_list_item(f"Bindings: {result.binding_count}")
    if result.marker_count:
        print_warning_message(
            f"{result.marker_count} binding(s) could not be fully translated; "
            "search the file for inline comments"
        )


@handle_errors
def validate_command(
    ctx: typer.Context,
    keymap_file: Annotated[
        Path, typer.Argument(help="Keymap JSON/YAML file read from the device")
    ],
) -> None:
    """Check a keymap file for inconsistencies before exporting it."""
    service = _service_from_context(ctx)
    keymap = service.load_keymap(keymap_file)
    issues = service.validate(keymap)

    if issues:
        print_error_message(f"Keymap has {len(issues)} issue(s)")
        for issue in issues:
            print_list_item(issue)
        raise typer.Exit(1)

    print_success_message(
        f"Keymap is valid ({len(keymap.layers)} layers, {keymap.total_bindings} bindings)"
    )


def register_commands(app: typer.Typer) -> None:
    """Register export commands with the main app.

    Args:
        app: The main Typer app
    """
    app.command(name="export")(export_command)
    app.command(name="validate")(validate_command)
