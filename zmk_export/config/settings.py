"""Export settings loaded from a YAML file and ZMK_EXPORT_* environment variables."""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from zmk_export.core.errors import ConfigError
from zmk_export.core.structlog_logger import get_struct_logger
from zmk_export.hid.usage_tables import DEFAULT_USAGE_TABLE, HidUsageTable

from .formatting import KeymapFormatting


logger = get_struct_logger(__name__)

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ExportSettings(BaseSettings):
    """Settings for keymap export.

    Precedence order (highest to lowest):
    1. Environment variables (ZMK_EXPORT_*)
    2. Constructor arguments (config file data)
    3. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="ZMK_EXPORT_",
        case_sensitive=False,
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: Any,
        env_settings: Any,
        dotenv_settings: Any,
        file_secret_settings: Any,
    ) -> tuple[Any, ...]:
        """Environment variables override values read from the config file."""
        return (env_settings, init_settings)

    log_level: str = Field(default="WARNING", description="Default log level")
    bindings_per_row: int = Field(
        default=6, ge=1, description="Binding tokens per row in generated layers"
    )
    indent: str = Field(default="    ", description="One indentation level")
    key_gap: str = Field(default="  ", description="Separator between binding tokens")
    source_name: str = Field(
        default="ZMK Studio", description="Exporter named in the metadata header"
    )
    usage_labels_file: Path | None = Field(
        default=None,
        description="YAML/JSON file with extra HID usage labels ({page: {id: label}})",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is recognized."""
        upper_v = v.strip().upper()
        if upper_v not in VALID_LOG_LEVELS:
            raise ValueError(f"Log level must be one of {list(VALID_LOG_LEVELS)}")
        return upper_v

    @field_validator("usage_labels_file", mode="before")
    @classmethod
    def expand_usage_labels_file(cls, v: Any) -> Any:
        """Expand ``~`` in the usage label file path."""
        if isinstance(v, str) and v.strip():
            return Path(v.strip()).expanduser()
        if isinstance(v, str):
            return None
        return v

    def formatting(self) -> KeymapFormatting:
        """Formatting options for the generator."""
        return KeymapFormatting(
            bindings_per_row=self.bindings_per_row,
            indent=self.indent,
            key_gap=self.key_gap,
            source_name=self.source_name,
        )

    def usage_table(self) -> HidUsageTable:
        """The built-in usage table, extended by ``usage_labels_file`` if set."""
        if self.usage_labels_file is None:
            return DEFAULT_USAGE_TABLE
        extra = HidUsageTable.from_file(self.usage_labels_file)
        return DEFAULT_USAGE_TABLE.with_labels(extra.to_mapping())


def default_config_path() -> Path:
    """Location searched when no config file is given explicitly."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    base = Path(config_home) if config_home else Path.home() / ".config"
    return base / "zmk-export" / "config.yaml"


def load_settings(config_file: Path | None = None) -> ExportSettings:
    """Load settings from a YAML config file plus the environment.

    Args:
        config_file: Explicit config file; must exist when given. Without it
            the default location is read if present.

    Raises:
        ConfigError: The file is missing, unreadable, or holds invalid values
    """
    path = config_file
    if path is None:
        candidate = default_config_path()
        path = candidate if candidate.is_file() else None
    elif not path.is_file():
        raise ConfigError("Config file not found", path=str(path))

    data: dict[str, Any] = {}
    if path is not None:
        try:
            loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError("Cannot read config file", path=str(path)) from e
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigError("Config file must contain a mapping", path=str(path))
        data = loaded
        logger.debug("config_file_loaded", path=str(path), keys=sorted(data))

    try:
        settings = ExportSettings(**data)
        # indent and key_gap are only checked by the formatting model
        settings.formatting()
        return settings
    except ValidationError as e:
        raise ConfigError(
            "Invalid settings", path=str(path) if path else None, details=str(e)
        ) from e
