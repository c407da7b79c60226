"""Formatting options for generated keymap files."""

from pydantic import Field, field_validator

from zmk_export.models.base import ExportBaseModel


class KeymapFormatting(ExportBaseModel):
    """Layout of the generated DeviceTree text."""

    bindings_per_row: int = Field(
        default=6, ge=1, description="Binding tokens per line inside bindings = < >"
    )
    indent: str = Field(default="    ", description="One level of indentation")
    key_gap: str = Field(default="  ", description="Separator between tokens in a row")
    source_name: str = Field(
        default="ZMK Studio", description="Exporter named in the metadata header"
    )

    @field_validator("indent")
    @classmethod
    def validate_indent(cls, v: str) -> str:
        """Indentation may only contain spaces and tabs."""
        if v.strip(" \t"):
            raise ValueError("indent must contain only spaces or tabs")
        return v

    @field_validator("key_gap")
    @classmethod
    def validate_key_gap(cls, v: str) -> str:
        """Tokens must stay whitespace-separated."""
        if not v or v.strip(" \t"):
            raise ValueError("key_gap must be one or more spaces or tabs")
        return v


DEFAULT_FORMATTING = KeymapFormatting()
