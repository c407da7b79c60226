"""Result models for export operations."""

from datetime import datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from zmk_export.core.structlog_logger import get_struct_logger


logger = get_struct_logger(__name__)


class BaseResult(BaseModel):
    """Base class for operation results."""

    model_config = ConfigDict(validate_assignment=True)

    success: bool
    timestamp: datetime = Field(default_factory=datetime.now)
    messages: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_success_consistency(self) -> "BaseResult":
        """Ensure success flag is consistent with errors."""
        if self.errors and self.success:
            logger.warning("result_success_mismatch", error_count=len(self.errors))
            # Bypass validate_assignment to avoid re-entering this validator
            object.__setattr__(self, "success", False)
        return self

    def add_message(self, message: str) -> None:
        """Add an informational message."""
        self.messages.append(message)
        logger.info("result_message_added", message=message)

    def add_error(self, error: str) -> None:
        """Add an error message and mark the result as failed."""
        self.errors.append(error)
        logger.error("result_error_added", error=error)
        self.success = False

    def is_success(self) -> bool:
        """Check if the operation was successful."""
        return self.success and not self.errors


class ExportResult(BaseResult):
    """Outcome of exporting a keymap to a .keymap file."""

    output_path: Path | None = None
    layer_count: int = 0
    binding_count: int = 0
    unknown_behaviors: int = 0
    unresolved_usages: int = 0
    missing_params: int = 0

    @property
    def marker_count(self) -> int:
        """Number of inline markers that need hand-repair in the output."""
        return self.unknown_behaviors + self.unresolved_usages + self.missing_params

    def get_summary(self) -> dict[str, Any]:
        """Get a summary of the result."""
        return {
            "success": self.success,
            "output_path": str(self.output_path) if self.output_path else None,
            "layers": self.layer_count,
            "bindings": self.binding_count,
            "markers": self.marker_count,
            "errors": self.errors or None,
        }


__all__ = ["BaseResult", "ExportResult"]
