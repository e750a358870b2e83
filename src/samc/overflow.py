"""Retrieval of event text too long to be sent inline."""

from __future__ import annotations

import logging

from samc.acme import Window

logger = logging.getLogger(__name__)

INLINE_LIMIT = 256


def read_overflow_text(window: Window, start: int, end: int) -> str:
    """Read runes ``start`` to ``end`` of the window body via ``addr``/``data``.

    A short read is returned as is: the body may have changed since the event
    was generated. ``OSError`` is raised when the window is gone.
    """
    count = end - start
    if start < 0 or count <= 0:
        return ""
    # acme resets the address whenever addr is first opened; hold it open.
    with open(window.file("addr"), "a", encoding="utf-8") as addr:
        addr.write(f"#{start}")
        addr.flush()
        with open(window.file("data"), "r", encoding="utf-8", newline="") as data:
            text = data.read(count)
    if len(text) < count:
        logger.debug(
            "Short overflow read on %s: wanted %d runes, got %d",
            window,
            count,
            len(text),
        )
    return text
