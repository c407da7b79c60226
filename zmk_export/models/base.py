"""Base model for all zmk-export Pydantic models.

Keymap data is handed to the generator once and never modified, so models are
frozen. Field aliases carry the camelCase names used by keymap JSON files.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict


class ExportBaseModel(BaseModel):
    """Base model class for all zmk-export Pydantic models.

    Serialization helpers always use aliases so a dumped model can be read
    back by the same loader:
    - by_alias=True: Use field aliases for serialization
    - mode="json": Use JSON-compatible serialization (e.g., datetime -> ISO string)
    """

    model_config = ConfigDict(
        extra="ignore",
        frozen=True,
        populate_by_name=True,
        use_enum_values=False,
    )

    def to_dict(self) -> dict[str, Any]:
        """Convert model to dictionary with consistent serialization parameters.

        Returns:
            Dictionary representation using JSON-compatible serialization
        """
        return self.model_dump(by_alias=True, mode="json")

    def to_dict_python(self) -> dict[str, Any]:
        """Convert model to dictionary using Python serialization.

        Returns:
            Dictionary representation using Python types (e.g., datetime objects)
        """
        return self.model_dump(by_alias=True, mode="python")
