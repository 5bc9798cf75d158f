"""Application settings read from ``settings.json``."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from loguru import logger

from infrastructure.constants import DEFAULT_ARGUMENTS, DEFAULT_EXECUTABLE

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


class JsonSettings:
    """JSON settings with dotted-key lookup and typed accessors.

    A missing file is not an error: every accessor then returns its default.
    Values of the wrong type are logged and replaced by the default too.
    """

    def __init__(self, settings_path: str | Path) -> None:
        self._path = Path(settings_path)
        self._data: dict[str, Any] = {}
        if self._path.exists():
            with self._path.open("r", encoding="utf-8") as f:
                self._data = json.load(f)
        else:
            logger.warning("No settings file at {}, using defaults", self._path)

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str, default: Any | None = None) -> Any:
        """Look up a dotted key such as ``exiftool.executable``."""
        node: Any = self._data
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def exiftool_executable(self) -> str:
        value = self.get("exiftool.executable")
        if isinstance(value, str) and value.strip():
            return value
        if value is not None:
            logger.warning("Ignoring invalid exiftool.executable: {!r}", value)
        return DEFAULT_EXECUTABLE

    def exiftool_arguments(self) -> list[str]:
        value = self.get("exiftool.arguments")
        if isinstance(value, list) and all(isinstance(a, str) for a in value):
            return list(value)
        if value is not None:
            logger.warning("Ignoring invalid exiftool.arguments: {!r}", value)
        return list(DEFAULT_ARGUMENTS)

    def log_level(self) -> str:
        value = str(self.get("logging.level", "INFO")).upper()
        if value not in LOG_LEVELS:
            logger.warning("Unknown logging.level {!r}, using INFO", value)
            return "INFO"
        return value

    def log_directory(self) -> str | None:
        value = self.get("logging.directory")
        return str(value) if value else None
