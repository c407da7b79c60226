"""Core test fixtures for the zmk-export project."""

import json
import logging
import os
from collections.abc import Callable, Generator
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

from zmk_export.hid import HID_PAGE_KEYBOARD, hid_usage
from zmk_export.models import Binding, Keymap, Layer


def kb(usage_id: int) -> int:
    """Usage code of a Keyboard-page key."""
    return hid_usage(HID_PAGE_KEYBOARD, usage_id)


@pytest.fixture(autouse=True)
def isolated_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[None, None, None]:
    """Keep tests away from the user's config file and ZMK_EXPORT_* variables.

    Also restores the root logger, since the CLI callback replaces its
    handlers with ones bound to the runner's streams.
    """
    for key in list(os.environ):
        if key.upper().startswith("ZMK_EXPORT_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))

    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level
    yield
    root_logger.handlers = handlers
    root_logger.setLevel(level)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def sample_layers() -> list[Layer]:
    """Two small layers: letters with a transparent key, numbers with &mo 0."""
    return [
        Layer(
            id=0,
            label="Default",
            bindings=(
                Binding(behavior_id=1, param1=kb(0x04), position=0),
                Binding(behavior_id=1, param1=kb(0x05), position=1),
                Binding(behavior_id=0, param1=0, position=2),
            ),
        ),
        Layer(
            id=1,
            label="Lower",
            bindings=(
                Binding(behavior_id=1, param1=kb(0x1E), position=0),
                Binding(behavior_id=1, param1=kb(0x1F), position=1),
                Binding(behavior_id=4, param1=0, position=2),
            ),
        ),
    ]


@pytest.fixture
def sample_keymap(sample_layers: list[Layer]) -> Keymap:
    """Keymap read from a 'test-keyboard' on 2025-11-09."""
    return Keymap(
        layers=tuple(sample_layers),
        device_name="test-keyboard",
        timestamp=datetime(2025, 11, 9, 10, 0, tzinfo=UTC),
        version="1.0.0",
        total_bindings=6,
    )


@pytest.fixture
def sample_keymap_dict() -> dict[str, Any]:
    """The sample keymap in the camelCase JSON shape read from devices."""
    return {
        "layers": [
            {
                "id": 0,
                "label": "Default",
                "bindings": [
                    {"behaviorId": 1, "param1": kb(0x04), "param2": None, "position": 0},
                    {"behaviorId": 1, "param1": kb(0x05), "param2": None, "position": 1},
                    {"behaviorId": 0, "param1": 0, "param2": None, "position": 2},
                ],
            },
            {
                "id": 1,
                "label": "Lower",
                "bindings": [
                    {"behaviorId": 1, "param1": kb(0x1E), "param2": None, "position": 0},
                    {"behaviorId": 1, "param1": kb(0x1F), "param2": None, "position": 1},
                    {"behaviorId": 4, "param1": 0, "param2": None, "position": 2},
                ],
            },
        ],
        "deviceName": "test-keyboard",
        "timestamp": "2025-11-09T10:00:00Z",
        "version": "1.0.0",
        "totalBindings": 6,
    }


@pytest.fixture
def write_keymap_file(
    tmp_path: Path,
) -> Callable[[dict[str, Any], str], Path]:
    """Factory writing keymap data to a JSON file under tmp_path."""

    def _write(data: dict[str, Any], name: str = "keymap.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def keymap_file(
    sample_keymap_dict: dict[str, Any],
    write_keymap_file: Callable[[dict[str, Any], str], Path],
) -> Path:
    """Sample keymap written to keymap.json."""
    return write_keymap_file(sample_keymap_dict, "keymap.json")
