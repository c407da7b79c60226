"""Basic tests for CLI functionality."""

import json

import pytest

from zmk_export import __version__
from zmk_export.cli import app
from zmk_export.cli.commands.inspect import parse_usage_argument


def test_help_command(cli_runner):
    """Test help command shows available commands."""
    result = cli_runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "Usage:" in result.output
    for command in ("export", "validate", "behaviors", "usage"):
        assert command in result.output


def test_version(cli_runner):
    result = cli_runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert f"zmk-export v{__version__}" in result.output


def test_subcommand_help(cli_runner):
    for cmd in ["export", "validate", "behaviors", "usage"]:
        result = cli_runner.invoke(app, [cmd, "--help"], catch_exceptions=False)
        assert result.exit_code == 0
        assert cmd in result.output.lower()


class TestExportCommand:
    """Tests for `zmk-export export`."""

    def test_default_output_path(self, cli_runner, keymap_file):
        result = cli_runner.invoke(app, ["export", str(keymap_file)])

        output = keymap_file.with_suffix(".keymap")
        assert result.exit_code == 0, result.output
        assert output.is_file()
        assert "#define DEFAULT 0" in output.read_text(encoding="utf-8")
        assert "Keymap exported" in result.output

    def test_explicit_output(self, cli_runner, keymap_file, tmp_path):
        output = tmp_path / "config" / "corne.keymap"

        result = cli_runner.invoke(app, ["export", str(keymap_file), "-o", str(output)])

        assert result.exit_code == 0, result.output
        assert "lower_layer {" in output.read_text(encoding="utf-8")

    def test_refuses_existing_file(self, cli_runner, keymap_file, tmp_path):
        output = tmp_path / "existing.keymap"
        output.write_text("keep", encoding="utf-8")

        result = cli_runner.invoke(app, ["export", str(keymap_file), "-o", str(output)])

        assert result.exit_code == 1
        assert "--force" in result.output
        assert output.read_text(encoding="utf-8") == "keep"

    def test_force(self, cli_runner, keymap_file, tmp_path):
        output = tmp_path / "existing.keymap"
        output.write_text("keep", encoding="utf-8")

        result = cli_runner.invoke(
            app, ["export", str(keymap_file), "-o", str(output), "--force"]
        )

        assert result.exit_code == 0, result.output
        assert "keymap {" in output.read_text(encoding="utf-8")

    def test_stdout(self, cli_runner, keymap_file):
        result = cli_runner.invoke(app, ["export", str(keymap_file), "--stdout"])

        assert result.exit_code == 0, result.output
        assert result.stdout.startswith("/*\n * ZMK keymap")
        assert result.stdout.endswith(" */\n")
        assert not keymap_file.with_suffix(".keymap").exists()

    def test_warns_about_markers(self, cli_runner, sample_keymap_dict, write_keymap_file):
        sample_keymap_dict["layers"][0]["bindings"][2]["behaviorId"] = 77
        path = write_keymap_file(sample_keymap_dict, "odd.json")

        result = cli_runner.invoke(app, ["export", str(path)])

        assert result.exit_code == 0, result.output
        assert "unknown behavior ids [77]" in result.output
        assert "could not be fully translated" in result.output
        assert "/* Unknown behavior 77 */" in path.with_suffix(".keymap").read_text(
            encoding="utf-8"
        )

    def test_missing_input(self, cli_runner, tmp_path):
        result = cli_runner.invoke(app, ["export", str(tmp_path / "missing.json")])

        assert result.exit_code == 1
        assert "Keymap file not found" in result.output

    def test_settings_from_config_file(self, cli_runner, keymap_file, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("bindings_per_row: 1\nsource_name: CLI Test\n", encoding="utf-8")

        result = cli_runner.invoke(
            app, ["-c", str(config), "export", str(keymap_file), "--stdout"]
        )

        assert result.exit_code == 0, result.output
        assert "Exported from CLI Test" in result.stdout
        assert "                &kp A\n                &kp B\n" in result.stdout

    def test_missing_config_file(self, cli_runner, keymap_file, tmp_path):
        result = cli_runner.invoke(
            app, ["-c", str(tmp_path / "nope.yaml"), "export", str(keymap_file)]
        )

        assert result.exit_code == 1
        assert "Config file not found" in result.output

    def test_log_file(self, cli_runner, keymap_file, tmp_path):
        log_file = tmp_path / "logs" / "export.log"

        result = cli_runner.invoke(
            app, ["-v", "--log-file", str(log_file), "export", str(keymap_file)]
        )

        assert result.exit_code == 0, result.output
        events = [
            json.loads(line)["event"]
            for line in log_file.read_text(encoding="utf-8").splitlines()
        ]
        assert "keymap_exported" in events


class TestValidateCommand:
    """Tests for `zmk-export validate`."""

    def test_valid(self, cli_runner, keymap_file):
        result = cli_runner.invoke(app, ["validate", str(keymap_file)])

        assert result.exit_code == 0, result.output
        assert "Keymap is valid" in result.output

    def test_issues(self, cli_runner, sample_keymap_dict, write_keymap_file):
        sample_keymap_dict["totalBindings"] = 7
        path = write_keymap_file(sample_keymap_dict, "wrong.json")

        result = cli_runner.invoke(app, ["validate", str(path)])

        assert result.exit_code == 1
        assert "totalBindings is 7" in result.output


class TestInspectCommands:
    """Tests for `behaviors` and `usage`."""

    def test_behaviors(self, cli_runner):
        result = cli_runner.invoke(app, ["behaviors"])

        assert result.exit_code == 0, result.output
        for reference in ("&trans", "&kp", "&mt", "&lt", "&mo", "&tog", "&bt"):
            assert reference in result.output

    @pytest.mark.parametrize("code", ["0x070004", "458756", "7:4", "0x07:0x04"])
    def test_usage_forms(self, cli_runner, code):
        result = cli_runner.invoke(app, ["usage", code])

        assert result.exit_code == 0, result.output
        assert "letter" in result.output

    def test_usage_modifier(self, cli_runner):
        result = cli_runner.invoke(app, ["usage", "0x0700e6"])

        assert result.exit_code == 0, result.output
        assert "RALT" in result.output

    def test_usage_unresolved(self, cli_runner):
        result = cli_runner.invoke(app, ["usage", "0x0700ff"])

        assert result.exit_code == 1
        assert "has no ZMK key name" in result.output

    def test_usage_invalid(self, cli_runner):
        result = cli_runner.invoke(app, ["usage", "keyboard-a"])
        assert result.exit_code == 2


@pytest.mark.parametrize(
    "value, expected",
    [
        ("0x070004", 0x070004),
        ("458756", 0x070004),
        ("7:4", 0x070004),
        ("0x0C:0xCD", 0x0C00CD),
        (" 0x0c00cd ", 0x0C00CD),
    ],
)
def test_parse_usage_argument(value, expected):
    assert parse_usage_argument(value) == expected
