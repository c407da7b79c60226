"""Behavior definitions for the firmware behavior registry."""

from typing import Literal

from pydantic import Field

from .base import ExportBaseModel


class Behavior(ExportBaseModel):
    """A firmware behavior that a binding can reference by numeric id."""

    id: int = Field(ge=0)
    code: str
    display_name: str = Field(alias="displayName")
    param_count: Literal[0, 1, 2] = Field(alias="paramCount")
    description: str = ""

    @property
    def reference(self) -> str:
        """DeviceTree reference token, e.g. ``&kp``."""
        return f"&{self.code}"
