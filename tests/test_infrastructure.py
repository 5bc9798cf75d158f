"""Tests for settings, logging setup and command building."""

import json
from pathlib import Path
import subprocess
import sys

from loguru import logger
import pytest

from infrastructure.constants import DEFAULT_ARGUMENTS
from infrastructure.exiftool import build_commands
from infrastructure.logging import get_log_directory, init_logging
from infrastructure.settings import JsonSettings


@pytest.fixture
def restore_logger():
    yield
    logger.remove()
    logger.add(sys.stderr)


class TestJsonSettings:
    def test_dotted_lookup(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(
            json.dumps({"exiftool": {"executable": "/opt/exiftool", "arguments": ["-j"]}}),
            encoding="utf-8",
        )
        settings = JsonSettings(path)

        assert settings.get("exiftool.executable") == "/opt/exiftool"
        assert settings.get("exiftool.arguments") == ["-j"]
        assert settings.get("exiftool.missing", "fallback") == "fallback"
        assert settings.get("exiftool.executable.deeper") is None

    def test_missing_file_falls_back_to_defaults(self, tmp_path):
        settings = JsonSettings(tmp_path / "nope.json")
        assert settings.get("logging.level", "INFO") == "INFO"
        assert settings.path.name == "nope.json"
        assert settings.exiftool_executable() == "exiftool"
        assert settings.exiftool_arguments() == list(DEFAULT_ARGUMENTS)
        assert settings.log_level() == "INFO"
        assert settings.log_directory() is None

    def test_typed_accessors(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(
            json.dumps(
                {
                    "exiftool": {"executable": "/opt/exiftool", "arguments": ["-j", "-G1"]},
                    "logging": {"level": "debug", "directory": "/tmp/gm-logs"},
                }
            ),
            encoding="utf-8",
        )
        settings = JsonSettings(path)

        assert settings.exiftool_executable() == "/opt/exiftool"
        assert settings.exiftool_arguments() == ["-j", "-G1"]
        assert settings.log_level() == "DEBUG"
        assert settings.log_directory() == "/tmp/gm-logs"

    def test_invalid_values_fall_back(self, tmp_path):
        path = tmp_path / "settings.json"
        document = {"exiftool": {"executable": "", "arguments": "-j"}, "logging": {"level": 5}}
        path.write_text(json.dumps(document), encoding="utf-8")
        settings = JsonSettings(path)

        assert settings.exiftool_executable() == "exiftool"
        assert settings.exiftool_arguments() == list(DEFAULT_ARGUMENTS)
        assert settings.log_level() == "INFO"


def test_init_logging_writes_to_directory(tmp_path, restore_logger):
    log_dir = init_logging(str(tmp_path / "logs"), level="debug")
    logger.info("hello from the test")
    logger.complete()

    assert log_dir.is_dir()
    files = list(log_dir.glob("app_*.log"))
    assert len(files) == 1
    assert "hello from the test" in files[0].read_text(encoding="utf-8")


def test_default_log_directory_is_per_user():
    assert get_log_directory().endswith("GetMetadata/logs")


def test_build_commands_one_argv_per_path():
    commands = build_commands(["/a.jpg", "/b c.png"])
    assert commands == [
        ["exiftool", *DEFAULT_ARGUMENTS, "/a.jpg"],
        ["exiftool", *DEFAULT_ARGUMENTS, "/b c.png"],
    ]
    assert DEFAULT_ARGUMENTS == ("-j", "-g", "-H", "-l")


def test_build_commands_with_custom_tool():
    assert build_commands(["x"], "/usr/bin/exiftool", ["-j"]) == [["/usr/bin/exiftool", "-j", "x"]]


def test_settings_load_without_qt():
    root = Path(__file__).resolve().parent.parent
    code = "import sys, infrastructure.settings; print('PySide6' in sys.modules)"
    result = subprocess.run(
        [sys.executable, "-c", code], cwd=root, capture_output=True, text=True, check=True
    )
    assert result.stdout.strip() == "False"


def test_package_metadata_does_not_publish_requirements_document():
    tomllib = pytest.importorskip("tomllib")
    root = Path(__file__).resolve().parent.parent
    with (root / "pyproject.toml").open("rb") as f:
        project = tomllib.load(f)["project"]
    assert project["name"] == "getmetadata"
    assert "readme" not in project
