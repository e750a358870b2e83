"""Logging setup for samc.

Everything goes to a rotating file; stderr only carries warnings and errors,
since acme shows stderr in its ``+Errors`` window.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
import os
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s"
LEVEL_ENV = "SAMC_LOG_LEVEL"


class _SkipReported(logging.Filter):
    """Keep messages already printed by the reporter off the console."""

    def filter(self, record: logging.LogRecord) -> bool:
        return not getattr(record, "reported", False)


def _default_log_dir() -> Path:
    state_home = os.getenv("XDG_STATE_HOME")
    if state_home:
        return Path(state_home) / "samc" / "logs"
    return Path.home() / ".samc" / "logs"


def _level_from_env() -> int:
    level = logging.getLevelName(os.getenv(LEVEL_ENV, "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


def _is_console(handler: logging.Handler) -> bool:
    return isinstance(handler, logging.StreamHandler) and not isinstance(
        handler, logging.FileHandler
    )


def init_logging() -> Path:
    """Attach the file and console handlers to the root logger once.

    Returns the log file path; when the log directory cannot be created only
    the console handler is installed.
    """
    log_path = _default_log_dir() / "app.log"
    level = _level_from_env()
    formatter = logging.Formatter(LOG_FORMAT)
    root = logging.getLogger()
    root.setLevel(level)

    if not any(isinstance(h, RotatingFileHandler) for h in root.handlers):
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                log_path, maxBytes=2_000_000, backupCount=5, encoding="utf-8"
            )
        except OSError as exc:
            logging.getLogger(__name__).warning(
                "Cannot write %s (%s); logging to stderr only", log_path, exc
            )
        else:
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)

    if not any(_is_console(h) for h in root.handlers):
        console = logging.StreamHandler()
        console.setLevel(max(level, logging.WARNING))
        console.setFormatter(formatter)
        console.addFilter(_SkipReported())
        root.addHandler(console)

    logging.getLogger(__name__).info("Logging initialized at %s", log_path)
    return log_path


def set_console_level(level: int) -> None:
    """Adjust the stderr handler level, leaving the file handler alone."""
    for handler in logging.getLogger().handlers:
        if _is_console(handler):
            handler.setLevel(level)
