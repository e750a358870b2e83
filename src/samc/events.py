"""Decoding of acme's per-window event stream.

Each record has the layout ``c1 c2 q0 q1 flag n text`` followed by a newline,
where ``c1`` is the origin, ``c2`` the kind of action, ``q0``/``q1`` the rune
addresses of the text and ``n`` its length. Text of ``INLINE_LIMIT`` runes or
more is not sent (``n`` is zero) and has to be read back from the window.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import re
from typing import Callable, Iterator, Optional, TextIO

from samc.overflow import INLINE_LIMIT

logger = logging.getLogger(__name__)

OverflowReader = Callable[[int, int], str]

_INT_RE = re.compile(r"[+-]?[0-9]+")

_FIELD_ORIGIN = 1
_FIELD_END = 2
_FIELD_LENGTH = 4


@dataclass(frozen=True)
class Event:
    """A mouse action on a window.

    ``middle`` is True for button 2 (execute) actions and False for button 3
    (look) actions.
    """

    middle: bool
    text: str


def _parse_int(text: str) -> Optional[int]:
    if not _INT_RE.fullmatch(text):
        return None
    return int(text)


class EventDecoder:
    """Character-at-a-time parser over a window's ``event`` file."""

    def __init__(
        self, stream: TextIO, read_overflow: Optional[OverflowReader] = None
    ) -> None:
        self._stream = stream
        self._read_overflow = read_overflow
        self._reset()

    def _reset(self) -> None:
        self._field_count = 0
        self._field: list[str] = []
        self._mouse = False
        self._middle = False
        self._start = -1
        self._end = -1

    def __iter__(self) -> Iterator[Event]:
        while True:
            rune = self._stream.read(1)
            if not rune:
                return
            event = self.feed(rune)
            if event is not None and event.text:
                yield event

    def feed(self, rune: str) -> Optional[Event]:
        """Advance the parser by one rune, returning an event when complete."""
        if rune == "\n":
            self._reset()
            return None
        if rune != " ":
            self._field.append(rune)
            return None
        field = "".join(self._field)
        self._field = []
        self._field_count += 1
        if self._field_count == _FIELD_ORIGIN:
            self._parse_origin(field)
        elif self._field_count == _FIELD_END:
            end = _parse_int(field)
            self._end = -1 if end is None else end
        elif self._field_count == _FIELD_LENGTH:
            return self._read_text(field)
        return None

    def _parse_origin(self, field: str) -> None:
        if len(field) <= 2 or field[0] != "M":
            return
        if field[1] in "xX":
            self._mouse, self._middle = True, True
        elif field[1] in "lL":
            self._mouse, self._middle = True, False
        if self._mouse:
            start = _parse_int(field[2:])
            self._start = -1 if start is None else start

    def _read_text(self, field: str) -> Optional[Event]:
        length = _parse_int(field)
        if length is None:
            return None
        if length > 0:
            # The payload may contain spaces, so it is read by count.
            text = self._stream.read(length)
            if len(text) < length or not self._mouse:
                return None
            return Event(self._middle, text)
        if not self._mouse or length < 0:
            return None
        return self._read_elided()

    def _read_elided(self) -> Optional[Event]:
        if self._start < 0 or self._end < 0:
            return None
        if self._end - self._start < INLINE_LIMIT:
            return None
        if self._read_overflow is None:
            return None
        try:
            text = self._read_overflow(self._start, self._end)
        except OSError:
            logger.warning(
                "Dropping event %d-%d: window text unavailable",
                self._start,
                self._end,
                exc_info=True,
            )
            return None
        return Event(self._middle, text)
