"""loguru setup: a rotating file sink per user, optional console echo."""

from __future__ import annotations

import os
from pathlib import Path
import sys

from loguru import logger

APP_DIR_NAME = "GetMetadata"
LOG_FILE_PATTERN = "app_{time:YYYYMMDD}.log"


def get_log_directory() -> str:
    """Per-user log directory, honouring ``XDG_DATA_HOME`` when set."""
    data_home = os.environ.get("XDG_DATA_HOME") or str(Path.home() / ".local" / "share")
    return str(Path(data_home) / APP_DIR_NAME / "logs")


def init_logging(log_dir: str | None = None, level: str = "INFO", console: bool = False) -> Path:
    """Replace loguru's default sink with a rotating file sink.

    Args:
        log_dir: Directory for log files; `get_log_directory()` when None
        level: Minimum level written to the file
        console: Also echo warnings and errors to stderr

    Returns:
        Path: The directory log files are written to
    """
    log_path = Path(log_dir or get_log_directory()).expanduser()
    log_path.mkdir(parents=True, exist_ok=True)

    logger.remove()
    logger.add(
        str(log_path / LOG_FILE_PATTERN),
        rotation="10 MB",
        retention="10 days",
        compression="zip",
        enqueue=True,
        backtrace=False,
        diagnose=False,
        level=level.upper(),
    )
    if console:
        logger.add(sys.stderr, level="WARNING", format="{level}: {message}")
    return log_path
