# src/asset_minimizer/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

PROJECT_LOGGER = "asset_minimizer"


class _ConsoleNoiseFilter(logging.Filter):
    """
    Console gets every asset_minimizer record at the handler level.
    Everything else (third-party libs, 'py.warnings') only at ERROR+.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name == PROJECT_LOGGER or name.startswith(PROJECT_LOGGER + "."):
            return True
        return record.levelno >= logging.ERROR


def _level_from_name(level_name: str, default: int = logging.INFO) -> int:
    level = logging.getLevelName(str(level_name).strip().upper())
    return level if isinstance(level, int) else default


def setup_logging(
    *,
    log_dir: str | Path = ".local/asset-minimizer",
    log_name: str = "asset-minimizer",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Install the process-wide handlers and return the log file path.

    stderr carries the filtered console stream (stdout stays free for worker output);
    <log_dir>/<log_name>.log carries everything from file_level up.
    Safe to call again: previous root handlers are closed and replaced.
    """
    log_file = Path(log_dir) / f"{log_name}.log"
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    root.setLevel(min(console_level, file_level))

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.addFilter(_ConsoleNoiseFilter())

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(file_level)

    for handler in (console, file_handler):
        handler.setFormatter(fmt)
        root.addHandler(handler)

    logging.captureWarnings(True)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    return log_file


def setup_logging_from_settings(settings) -> Path:
    """Console level from settings.log_level, file named after settings.app_name."""
    return setup_logging(
        log_dir=settings.log_dir,
        log_name=settings.app_name,
        console_level=_level_from_name(settings.log_level),
    )
