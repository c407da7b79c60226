"""Tests for KeymapExportService."""

from unittest.mock import patch

import pytest
import yaml

from zmk_export.config import ExportSettings, KeymapFormatting
from zmk_export.core.errors import ExportError, KeymapError
from zmk_export.hid import DEFAULT_USAGE_TABLE, HID_PAGE_KEYBOARD
from zmk_export.models import Binding, Keymap, Layer
from zmk_export.services import KeymapExportService, create_keymap_export_service


KEYBOARD = 0x07 << 16


@pytest.fixture
def service():
    """Service with the built-in usage table and default formatting."""
    return KeymapExportService(
        usage_table=DEFAULT_USAGE_TABLE, formatting=KeymapFormatting()
    )


def keymap_of(*layers, total=None):
    keymap = Keymap.from_layers(list(layers), device_name="kb", version="1")
    if total is not None:
        keymap = keymap.model_copy(update={"total_bindings": total})
    return keymap


class TestLoadKeymap:
    """Tests for reading keymap files."""

    def test_json(self, service, keymap_file, sample_keymap):
        assert service.load_keymap(keymap_file) == sample_keymap

    def test_yaml(self, service, tmp_path, sample_keymap_dict, sample_keymap):
        path = tmp_path / "keymap.yaml"
        path.write_text(yaml.safe_dump(sample_keymap_dict), encoding="utf-8")

        assert service.load_keymap(path) == sample_keymap

    def test_missing_file(self, service, tmp_path):
        with pytest.raises(KeymapError, match="not found"):
            service.load_keymap(tmp_path / "nope.json")

    def test_invalid_json(self, service, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{", encoding="utf-8")

        with pytest.raises(KeymapError, match="not valid JSON/YAML"):
            service.load_keymap(path)

    def test_invalid_keymap_data(self, service, write_keymap_file):
        path = write_keymap_file({"layers": "nope"}, "bad.json")

        with pytest.raises(KeymapError, match="Invalid keymap data"):
            service.load_keymap(path)


class TestValidate:
    """Tests for keymap consistency checks."""

    def test_clean_keymap(self, service, sample_keymap):
        assert service.validate(sample_keymap) == []

    def test_total_bindings_mismatch(self, service, sample_layers):
        issues = service.validate(keymap_of(*sample_layers, total=9))
        assert issues == ["totalBindings is 9 but layers hold 6 bindings"]

    def test_label_without_identifier(self, service):
        issues = service.validate(keymap_of(Layer(id=0, label="!!!")))
        assert issues == ['layer 0 "!!!": label yields no identifier']

    def test_duplicate_positions(self, service):
        layer = Layer(
            id=0,
            label="Base",
            bindings=(
                Binding(behavior_id=0, position=0),
                Binding(behavior_id=0, position=0),
                Binding(behavior_id=0, position=1),
            ),
        )

        issues = service.validate(keymap_of(layer))

        assert issues == ['layer 0 "Base": duplicate positions [0]']

    def test_position_gap(self, service):
        layer = Layer(
            id=0,
            label="Base",
            bindings=(
                Binding(behavior_id=0, position=0),
                Binding(behavior_id=0, position=2),
            ),
        )

        issues = service.validate(keymap_of(layer))

        assert len(issues) == 1
        assert "positions are not contiguous" in issues[0]

    def test_unknown_behaviors(self, service):
        layer = Layer(
            id=0,
            label="Base",
            bindings=(
                Binding(behavior_id=42, position=0),
                Binding(behavior_id=7, position=1),
            ),
        )

        issues = service.validate(keymap_of(layer))

        assert issues == ['layer 0 "Base": unknown behavior ids [7, 42]']

    def test_identifier_collision(self, service):
        issues = service.validate(
            keymap_of(Layer(id=0, label="Nav Media"), Layer(id=1, label="nav/media"))
        )
        assert issues == ["2 layers share the identifier NAV_MEDIA"]


class TestExport:
    """Tests for writing .keymap files."""

    def test_writes_file(self, service, sample_keymap, tmp_path):
        output = tmp_path / "out" / "test.keymap"

        result = service.export(sample_keymap, output)

        assert result.success
        assert output.read_text(encoding="utf-8") == service.render(sample_keymap)
        assert result.output_path == output
        assert result.layer_count == 2
        assert result.binding_count == 6
        assert result.marker_count == 0

    def test_refuses_to_overwrite(self, service, sample_keymap, tmp_path):
        output = tmp_path / "test.keymap"
        output.write_text("keep me", encoding="utf-8")

        result = service.export(sample_keymap, output)

        assert not result.success
        assert "already exists" in result.errors[0]
        assert output.read_text(encoding="utf-8") == "keep me"

    def test_force_overwrites(self, service, sample_keymap, tmp_path):
        output = tmp_path / "test.keymap"
        output.write_text("old", encoding="utf-8")

        result = service.export(sample_keymap, output, force=True)

        assert result.success
        assert "keymap {" in output.read_text(encoding="utf-8")

    def test_counts_markers(self, service, tmp_path):
        layer = Layer(
            id=0,
            label="Base",
            bindings=(
                Binding(behavior_id=99, position=0),
                Binding(behavior_id=1, param1=KEYBOARD | 0xFF, position=1),
                Binding(behavior_id=2, param1=KEYBOARD | 0xE0, position=2),
                Binding(behavior_id=3, param1=1, position=3),
            ),
        )

        result = service.export(keymap_of(layer), tmp_path / "markers.keymap")

        assert result.unknown_behaviors == 1
        assert result.unresolved_usages == 1
        assert result.missing_params == 2
        assert result.marker_count == 4
        assert any("need manual attention" in m for m in result.messages)

    def test_marker_text_in_labels_is_not_counted(self, service, tmp_path):
        layer = Layer(
            id=0,
            label="/* missing key */ /* HID 0x70004 */ /* Unknown behavior 1 */",
            bindings=(Binding(behavior_id=0, position=0),),
        )
        keymap = Keymap.from_layers([layer], device_name="/* missing param2 */", version="1")

        result = service.export(keymap, tmp_path / "labels.keymap")

        assert result.success
        assert result.marker_count == 0
        assert service.count_markers(keymap) == {
            "unknown_behaviors": 0,
            "unresolved_usages": 0,
            "missing_params": 0,
        }

    def test_write_failure(self, service, sample_keymap, tmp_path):
        with (
            patch("pathlib.Path.write_text", side_effect=OSError("disk full")),
            pytest.raises(ExportError, match="Cannot write keymap file"),
        ):
            service.export(sample_keymap, tmp_path / "test.keymap")


class TestCreateService:
    """Tests for the service factory."""

    def test_uses_settings_formatting(self, sample_keymap):
        service = create_keymap_export_service(
            ExportSettings(bindings_per_row=1, source_name="Unit Test")
        )

        result = service.render(sample_keymap)

        assert "Exported from Unit Test" in result
        assert "                &kp A\n                &kp B\n" in result

    def test_uses_extra_usage_labels(self, tmp_path):
        labels = tmp_path / "labels.yaml"
        labels.write_text('0x07:\n  0x90: "Keyboard LANG1"\n', encoding="utf-8")
        service = create_keymap_export_service(
            ExportSettings(usage_labels_file=str(labels))
        )
        layer = Layer(
            id=0,
            label="Base",
            bindings=(Binding(behavior_id=1, param1=(HID_PAGE_KEYBOARD << 16) | 0x90, position=0),),
        )

        assert "&kp LANG1" in service.render(keymap_of(layer))
