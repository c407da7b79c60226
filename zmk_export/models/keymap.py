"""Keymap models describing a keymap read from a running keyboard."""

from collections.abc import Sequence
from datetime import UTC, datetime
from enum import Enum

from pydantic import Field, field_validator

from .base import ExportBaseModel


class KeyCategory(str, Enum):
    """Coarse classification of a ZMK key name."""

    LETTER = "letter"
    NUMBER = "number"
    MODIFIER = "modifier"
    FUNCTION = "function"
    SPECIAL = "special"


class KeyCode(ExportBaseModel):
    """A resolved HID usage: symbolic ZMK name plus the usage table label."""

    hid_usage: int = Field(alias="hidUsage", ge=0)
    zmk_name: str = Field(alias="zmkName")
    label: str = ""
    category: KeyCategory


class Binding(ExportBaseModel):
    """One key position's behavior assignment."""

    behavior_id: int = Field(alias="behaviorId")
    param1: int = Field(default=0, ge=0)
    param2: int | None = Field(default=None, ge=0)
    position: int = Field(ge=0)


class Layer(ExportBaseModel):
    """A named set of bindings covering the keyboard's key positions."""

    id: int = Field(ge=0)
    label: str
    bindings: tuple[Binding, ...] = ()

    def sorted_bindings(self) -> list[Binding]:
        """Bindings ordered by key position; equal positions keep storage order."""
        return sorted(self.bindings, key=lambda binding: binding.position)


class Keymap(ExportBaseModel):
    """A complete keymap as read from a device, ready for export."""

    layers: tuple[Layer, ...] = ()
    device_name: str = Field(alias="deviceName")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    version: str
    total_bindings: int = Field(alias="totalBindings", ge=0)

    @field_validator("timestamp")
    @classmethod
    def normalize_timestamp(cls, v: datetime) -> datetime:
        """Treat naive timestamps as UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v

    @classmethod
    def from_layers(
        cls,
        layers: Sequence[Layer],
        device_name: str,
        version: str,
        timestamp: datetime | None = None,
    ) -> "Keymap":
        """Build a keymap whose binding total matches its layers."""
        return cls(
            layers=tuple(layers),
            device_name=device_name,
            version=version,
            timestamp=timestamp or datetime.now(UTC),
            total_bindings=sum(len(layer.bindings) for layer in layers),
        )


class ExportMetadata(ExportBaseModel):
    """Provenance written into the header of an exported keymap."""

    timestamp: str
    device_name: str = Field(alias="deviceName")
    version: str
    layer_count: int = Field(alias="layerCount", ge=0)


def format_timestamp(timestamp: datetime) -> str:
    """Render a timestamp as UTC ISO-8601 with milliseconds, e.g. ``2025-11-09T10:00:00.000Z``."""
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=UTC)
    utc = timestamp.astimezone(UTC)
    # strftime("%Y") does not zero-pad years before 1000 on every platform
    return (
        f"{utc.year:04d}-{utc.month:02d}-{utc.day:02d}"
        f"T{utc.hour:02d}:{utc.minute:02d}:{utc.second:02d}"
        f".{utc.microsecond // 1000:03d}Z"
    )
