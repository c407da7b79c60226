"""Keymap export service: load, validate, render and write keymaps."""

import json
import re
from collections import Counter
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from zmk_export.config.formatting import KeymapFormatting
from zmk_export.config.settings import ExportSettings
from zmk_export.core.errors import ExportError, KeymapError
from zmk_export.core.structlog_logger import StructlogMixin
from zmk_export.formatters.behavior_formatter import format_binding, get_behavior
from zmk_export.generators.keymap_generator import (
    IdentifierCase,
    generate,
    identifier_from_label,
)
from zmk_export.hid.resolver import make_key_name_resolver
from zmk_export.models.keymap import Keymap
from zmk_export.models.results import ExportResult
from zmk_export.protocols.usage_protocols import KeyNameResolver, UsageTableProtocol


UNKNOWN_BEHAVIOR_PATTERN = re.compile(r"/\* Unknown behavior -?\d+ \*/")
HID_USAGE_PATTERN = re.compile(r"/\* HID 0x[0-9a-f]+ \*/")
MISSING_PARAM_PATTERN = re.compile(r"/\* missing (?:key|param2) \*/")


class KeymapExportService(StructlogMixin):
    """Service for exporting keymaps read from a device to .keymap files."""

    def __init__(
        self,
        usage_table: UsageTableProtocol,
        formatting: KeymapFormatting,
    ) -> None:
        """Initialize with the usage table and formatting to render with.

        Args:
            usage_table: HID usage-name database for key-name resolution
            formatting: Layout options for the generated text
        """
        super().__init__()
        self._usage_table = usage_table
        self._formatting = formatting
        self._resolve_key_name: KeyNameResolver = make_key_name_resolver(usage_table)

    def load_keymap(self, path: Path) -> Keymap:
        """Load a keymap from a JSON or YAML file.

        Raises:
            KeymapError: The file is missing, unparsable, or not a valid keymap
        """
        if not path.is_file():
            raise KeymapError("Keymap file not found", path=str(path))

        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise KeymapError("Cannot read keymap file", path=str(path)) from e

        try:
            data: Any
            if path.suffix.lower() in (".yaml", ".yml"):
                data = yaml.safe_load(text)
            else:
                data = json.loads(text)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise KeymapError(
                "Keymap file is not valid JSON/YAML", path=str(path)
            ) from e

        try:
            keymap = Keymap.model_validate(data)
        except ValidationError as e:
            raise KeymapError(
                "Invalid keymap data", path=str(path), details=str(e)
            ) from e

        self.logger.debug(
            "keymap_loaded",
            path=str(path),
            layers=len(keymap.layers),
            bindings=keymap.total_bindings,
        )
        return keymap

    def validate(self, keymap: Keymap) -> list[str]:
        """Check the structural assumptions the generator relies on.

        The generator never checks these itself; it renders whatever it is
        given. Returns a list of human-readable findings, empty when clean.
        """
        issues: list[str] = []

        actual_total = sum(len(layer.bindings) for layer in keymap.layers)
        if actual_total != keymap.total_bindings:
            issues.append(
                f"totalBindings is {keymap.total_bindings} but layers hold "
                f"{actual_total} bindings"
            )

        identifiers: Counter[str] = Counter()
        for layer in keymap.layers:
            name = f'layer {layer.id} "{layer.label}"'
            identifier = identifier_from_label(layer.label, IdentifierCase.UPPER)
            if identifier:
                identifiers[identifier] += 1
            else:
                issues.append(f"{name}: label yields no identifier")

            positions = [binding.position for binding in layer.bindings]
            duplicates = sorted(
                pos for pos, count in Counter(positions).items() if count > 1
            )
            if duplicates:
                issues.append(f"{name}: duplicate positions {duplicates}")

            unique = sorted(set(positions))
            if unique and unique[-1] - unique[0] + 1 != len(unique):
                issues.append(
                    f"{name}: positions are not contiguous "
                    f"({unique[0]}..{unique[-1]} with {len(unique)} bindings)"
                )

            unknown = sorted(
                {
                    binding.behavior_id
                    for binding in layer.bindings
                    if get_behavior(binding.behavior_id) is None
                }
            )
            if unknown:
                issues.append(f"{name}: unknown behavior ids {unknown}")

        for identifier, count in sorted(identifiers.items()):
            if count > 1:
                issues.append(
                    f"{count} layers share the identifier {identifier}"
                )

        for issue in issues:
            self.logger.warning("keymap_validation_issue", issue=issue)
        return issues

    def render(self, keymap: Keymap) -> str:
        """Render a keymap to .keymap text."""
        return generate(keymap, self._resolve_key_name, self._formatting)

    def count_markers(self, keymap: Keymap) -> dict[str, int]:
        """Count the inline markers the bindings of a keymap render with.

        Only binding tokens are scanned; marker-like text in labels or
        metadata does not count.
        """
        counts = {"unknown_behaviors": 0, "unresolved_usages": 0, "missing_params": 0}
        for layer in keymap.layers:
            for binding in layer.bindings:
                token = format_binding(binding, self._resolve_key_name)
                counts["unknown_behaviors"] += len(
                    UNKNOWN_BEHAVIOR_PATTERN.findall(token)
                )
                counts["unresolved_usages"] += len(HID_USAGE_PATTERN.findall(token))
                counts["missing_params"] += len(MISSING_PARAM_PATTERN.findall(token))
        return counts

    def export(
        self, keymap: Keymap, output_path: Path, force: bool = False
    ) -> ExportResult:
        """Render a keymap and write it to ``output_path``.

        Args:
            keymap: Keymap to export
            output_path: Destination .keymap file
            force: Overwrite an existing file

        Returns:
            ExportResult with counts of inline markers needing hand-repair

        Raises:
            ExportError: The file could not be written
        """
        log = self.log_operation("export", output=str(output_path))
        result = ExportResult(
            success=True,
            output_path=output_path,
            layer_count=len(keymap.layers),
            binding_count=sum(len(layer.bindings) for layer in keymap.layers),
        )

        if output_path.exists() and not force:
            result.add_error(
                f"Output file already exists: {output_path}. Use --force to overwrite."
            )
            return result

        content = self.render(keymap)
        markers = self.count_markers(keymap)
        result.unknown_behaviors = markers["unknown_behaviors"]
        result.unresolved_usages = markers["unresolved_usages"]
        result.missing_params = markers["missing_params"]

        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(content, encoding="utf-8")
        except OSError as e:
            self.log_error_with_context("keymap_write_failed", e, path=str(output_path))
            raise ExportError("Cannot write keymap file", path=str(output_path)) from e

        result.add_message(f"Keymap written to {output_path}")
        if result.marker_count:
            result.add_message(
                f"{result.marker_count} binding(s) need manual attention"
            )
        log.info("keymap_exported", **result.get_summary())
        return result


def create_keymap_export_service(
    settings: ExportSettings | None = None,
    usage_table: UsageTableProtocol | None = None,
) -> KeymapExportService:
    """Create a KeymapExportService from settings.

    Args:
        settings: Export settings, defaults from the environment when None
        usage_table: Override the usage table built from the settings
    """
    settings = settings or ExportSettings()
    return KeymapExportService(
        usage_table=usage_table or settings.usage_table(),
        formatting=settings.formatting(),
    )
