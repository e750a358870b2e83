"""Interpreters for clicks in the playlist and browse windows."""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Optional, Protocol

from samc.events import Event
from samc.session import ServiceError, Session
from samc.ui.pathcodec import decode
from samc.ui.reporter import Reporter
from samc.vpath import ROOT, parent_dir, resolve, to_service

logger = logging.getLogger(__name__)

_INT_RE = re.compile(r"[+-]?[0-9]+")

# keyword: (client method, arguments, full repaint)
PLAYER_COMMANDS: dict[str, tuple[str, tuple[Any, ...], bool]] = {
    "Play": ("play", (), False),
    "Stop": ("stop", (), False),
    "Pause": ("pause", (1,), False),
    "Next": ("next", (), False),
    "Clear": ("clear", (), True),
    "Shuffle": ("shuffle", (), True),
    "Consume": ("consume", (1,), False),
    "NoConsume": ("consume", (0,), False),
}

# keyword: (argument count, builder of client method and arguments)
QUEUE_COMMANDS: dict[str, tuple[int, Callable[..., tuple[str, tuple[Any, ...]]]]] = {
    "Move": (2, lambda start, to: ("move", (start, to))),
    "Del": (1, lambda pos: ("delete", (pos,))),
    "rDel": (2, lambda start, end: ("delete", ((start, end),))),
}


class Controller(Protocol):
    """Window-level actions the interpreters can trigger."""

    @property
    def current_path(self) -> str: ...

    def quit(self) -> None: ...

    def refresh_playlist(self, full: bool) -> None: ...

    def open_browser(self, path: str) -> None: ...

    def close_browser(self) -> None: ...

    def navigate(self, path: str) -> bool: ...

    def show_info(self, path: str) -> None: ...


def parse_int(text: str) -> Optional[int]:
    """Parse a decimal integer with optional sign, or return None."""
    text = text.strip()
    if not _INT_RE.fullmatch(text):
        return None
    return int(text)


def _int_args(words: list[str], count: int) -> Optional[list[int]]:
    if len(words) != count:
        return None
    values = [parse_int(word) for word in words]
    if any(value is None for value in values):
        return None
    return [value for value in values if value is not None]


class _Interpreter:
    def __init__(
        self, session: Session, controller: Controller, reporter: Reporter
    ) -> None:
        self._session = session
        self._controller = controller
        self._reporter = reporter

    def _call(self, name: str, *args: Any) -> bool:
        """Run one client command; a lost connection is reported."""
        try:
            self._session.command(name, *args)
        except ServiceError as exc:
            if exc.connection_closed:
                self._reporter.warn(f"{name} failed: {exc}")
                raise
            logger.info("MPD rejected %s%r: %s", name, args, exc)
            return False
        return True


class PlaylistCommands(_Interpreter):
    """Commands clicked in the ``samc:`` window."""

    def handle(self, event: Event) -> None:
        if event.middle:
            self.execute(event.text.strip())
        else:
            self.look(event.text.strip())

    def execute(self, text: str) -> None:
        if text == "Quit":
            self._controller.quit()
            return
        if text == "Refresh":
            self._controller.refresh_playlist(True)
            return
        if text == "Browse":
            self._controller.open_browser(ROOT)
            return
        if text in PLAYER_COMMANDS:
            name, args, full = PLAYER_COMMANDS[text]
            self._run(full, name, *args)
            return
        words = text.split()
        if words and words[0] in QUEUE_COMMANDS:
            count, build = QUEUE_COMMANDS[words[0]]
            values = _int_args(words[1:], count)
            if values is None:
                logger.debug("Ignoring malformed command %r", text)
                return
            name, args = build(*values)
            self._run(True, name, *args)
            return
        position = parse_int(text)
        if position is not None:
            self._run(False, "play", position)

    def _run(self, full: bool, name: str, *args: Any) -> None:
        try:
            self._call(name, *args)
        except ServiceError:
            return
        self._controller.refresh_playlist(full)

    def look(self, text: str) -> None:
        """Open the browse window on the directory of a playlist entry."""
        position = parse_int(text)
        if position is None:
            return
        try:
            entries = self._session.command("playlistinfo", position)
        except ServiceError as exc:
            if exc.connection_closed:
                self._reporter.warn(f"cannot look up entry {position}: {exc}")
            else:
                logger.info("No playlist entry %d: %s", position, exc)
            return
        if not entries:
            return
        self._controller.open_browser(parent_dir(entries[0].get("file", "")))


class BrowseCommands(_Interpreter):
    """Commands clicked in the ``browse:`` window."""

    def handle(self, event: Event) -> None:
        text = decode(event.text)
        if event.middle:
            self.execute(text)
        else:
            self.look(text.strip())

    def execute(self, text: str) -> None:
        stripped = text.strip()
        if stripped == "Close":
            self._controller.close_browser()
            return
        if stripped == "Update":
            self.update()
            return
        words = stripped.split()
        if words and words[0] == "Info":
            if len(words) < 2:
                return
            relative = " ".join(words[1:])
            path = to_service(resolve(self._controller.current_path, relative))
            self._controller.show_info(path)
            return
        self.add(text)

    def update(self) -> None:
        path = to_service(self._controller.current_path)
        logger.info("Updating /%s", path)
        try:
            if path:
                self._session.command("update", path)
            else:
                self._session.command("update")
        except ServiceError as exc:
            self._reporter.error(f"failure to update path '{path}': {exc}")

    def add(self, text: str) -> None:
        """Queue every non-blank line of ``text``, relative to the browse path."""
        current = self._controller.current_path
        added = False
        for line in text.split("\n"):
            relative = line.strip()
            if not relative:
                continue
            path = to_service(resolve(current, relative))
            try:
                added = self._call("add", path)
            except ServiceError:
                added = False
        if added:
            self._controller.refresh_playlist(True)

    def look(self, text: str) -> None:
        self._controller.navigate(resolve(self._controller.current_path, text))
