# src/taskflow/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

_LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_LOG_FILE_NAME = "taskflow.log"


class _ConsoleNoiseFilter(logging.Filter):
    """Pass taskflow.* records; anything else (py.warnings included) only from ERROR up."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == "taskflow" or record.name.startswith("taskflow."):
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskflow",
    console_level: int | str = logging.INFO,
    file_level: int | str = logging.DEBUG,
    log_to_file: bool = True,
) -> None:
    """
    Install the root handlers for a taskflow process.

    stderr gets repository/controller activity at console_level. When
    log_to_file is set, <log_dir>/taskflow.log receives every record at
    file_level, third-party ones included. Calling it again replaces the
    handlers instead of stacking them.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for handler in list(root.handlers):
        root.removeHandler(handler)

    formatter = logging.Formatter(fmt=_LOG_FORMAT, datefmt=_DATE_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(formatter)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    if log_to_file:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(str(log_dir / _LOG_FILE_NAME), encoding="utf-8")
        file_handler.setLevel(file_level)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    # warnings.warn() -> "py.warnings" logger
    logging.captureWarnings(True)
