"""Commands for inspecting the behavior registry and HID usage resolution."""

from typing import TYPE_CHECKING, Annotated

import typer
from rich.table import Table

from zmk_export.cli.decorators import handle_errors
from zmk_export.cli.helpers import get_console, print_error_message
from zmk_export.cli.helpers.output import Colors
from zmk_export.formatters import get_all_behaviors
from zmk_export.hid import decode_usage, hid_usage, resolve_key_code


if TYPE_CHECKING:
    from zmk_export.cli.app import AppContext


def parse_usage_argument(value: str) -> int:
    """Parse a usage code given as ``0x070004``, ``458756`` or ``7:4``.

    In the ``page:id`` form each half may itself be hex or decimal.
    """
    text = value.strip()
    try:
        if ":" in text:
            page_text, id_text = text.split(":", 1)
            page, usage_id = int(page_text, 0), int(id_text, 0)
            if not (0 <= page <= 0xFFFF and 0 <= usage_id <= 0xFFFF):
                raise typer.BadParameter("page and id must fit in 16 bits")
            return hid_usage(page, usage_id)
        code = int(text, 0)
    except ValueError as e:
        raise typer.BadParameter(f"not a usage code: {value!r}") from e

    if not 0 <= code <= 0xFFFFFFFF:
        raise typer.BadParameter("usage code must fit in 32 bits")
    return code


@handle_errors
def behaviors_command() -> None:
    """List the behaviors the exporter knows by id."""
    table = Table(title="Behaviors", show_header=True, header_style=Colors.HEADER)
    table.add_column("ID", justify="right", style=Colors.PRIMARY)
    table.add_column("Code")
    table.add_column("Name")
    table.add_column("Params", justify="right")
    table.add_column("Description", style=Colors.MUTED)

    for behavior_id, behavior in sorted(get_all_behaviors().items()):
        table.add_row(
            str(behavior_id),
            behavior.reference,
            behavior.display_name,
            str(behavior.param_count),
            behavior.description,
        )

    get_console().print(table)


@handle_errors
def usage_command(
    ctx: typer.Context,
    code: Annotated[
        str,
        typer.Argument(help="Usage code: 0x070004, 458756 or page:id such as 7:4"),
    ],
) -> None:
    """Show how a HID usage code resolves to a ZMK key name."""
    app_ctx: AppContext = ctx.obj
    usage_code = parse_usage_argument(code)
    page, usage_id = decode_usage(usage_code)
    key_code = resolve_key_code(usage_code, app_ctx.settings.usage_table())

    if key_code is None:
        print_error_message(
            f"Usage 0x{usage_code:x} (page 0x{page:02x}, id 0x{usage_id:02x}) "
            "has no ZMK key name"
        )
        raise typer.Exit(1)

    table = Table(show_header=False, box=None)
    table.add_column("Field", style=Colors.PRIMARY)
    table.add_column("Value")
    table.add_row("Usage", f"0x{usage_code:x}")
    table.add_row("Page", f"0x{page:02x}")
    table.add_row("ID", f"0x{usage_id:02x}")
    table.add_row("Key name", key_code.zmk_name)
    table.add_row("Label", key_code.label)
    table.add_row("Category", key_code.category.value)
    get_console().print(table)


def register_commands(app: typer.Typer) -> None:
    """Register inspection commands with the main app.

    Args:
        app: The main Typer app
    """
    app.command(name="behaviors")(behaviors_command)
    app.command(name="usage")(usage_command)
