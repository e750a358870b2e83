"""User-facing error channel.

samc has no status bar of its own; messages go to stderr, which acme collects
in the +Errors window of the directory samc was started from.
"""

from __future__ import annotations

import logging
from typing import Optional

from rich.console import Console
from rich.text import Text

logger = logging.getLogger(__name__)

_STYLES = {
    "warn": "#ffcc66",
    "error": "#ff5f52",
}
_LOG_LEVELS = {
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


class Reporter:
    """Prints short diagnostics for the user and mirrors them to the log."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self._console = console or Console(stderr=True, highlight=False)

    def show_message(self, text: str, *, level: str = "info") -> None:
        logger.log(
            _LOG_LEVELS.get(level, logging.INFO), text, extra={"reported": True}
        )
        style = _STYLES.get(level)
        line = f"samc: {text}"
        self._console.print(Text(line, style=style) if style else Text(line))

    def info(self, text: str) -> None:
        self.show_message(text, level="info")

    def warn(self, text: str) -> None:
        self.show_message(text, level="warn")

    def error(self, text: str) -> None:
        self.show_message(text, level="error")
