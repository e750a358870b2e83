"""Rendering of the playlist and browse windows."""

from __future__ import annotations

import logging
from typing import Any

from samc.acme import Window
from samc.session import ServiceError, Session
from samc.ui.formatters import format_playlist, format_status_line
from samc.ui.pathcodec import encode
from samc.ui.reporter import Reporter
from samc.vpath import leaf_name, to_service

logger = logging.getLogger(__name__)


class PlaylistView:
    """Queue listing followed by a one-line player status.

    The status line is always last in the body so it can be replaced by
    erasing exactly the runes written for it.
    """

    def __init__(self, window: Window, session: Session, reporter: Reporter) -> None:
        self._window = window
        self._session = session
        self._reporter = reporter
        self._status_len = 0

    def show_playlist(self, *, fatal: bool = False) -> None:
        try:
            entries = self._session.command("playlistinfo")
        except ServiceError as exc:
            if fatal:
                raise
            self._reporter.warn(f"cannot list the playlist: {exc}")
            entries = []
        self._window.write_body(format_playlist(entries))

    def show_status(self, *, replace: bool, fatal: bool = False) -> None:
        try:
            status = self._session.command("status")
        except ServiceError as exc:
            if fatal:
                raise
            self._reporter.warn(f"cannot read the player status: {exc}")
            return
        line = format_status_line(status)
        if replace:
            self._window.erase_body(self._status_len)
        self._window.write_body(line)
        self._status_len = len(line)

    def refresh(self, full: bool, *, fatal: bool = False) -> None:
        """Repaint the status line, or the whole body when ``full``."""
        if full:
            self._window.clear_body()
            self._status_len = 0
            self.show_playlist(fatal=fatal)
        self.show_status(replace=not full, fatal=fatal)


class BrowseView:
    """Listing of one directory of the music database."""

    def __init__(self, window: Window, session: Session, reporter: Reporter) -> None:
        self._window = window
        self._session = session
        self._reporter = reporter

    @property
    def window(self) -> Window:
        return self._window

    def _list(self, service_path: str) -> list[dict[str, Any]]:
        if service_path:
            return self._session.call(lambda client: client.lsinfo(service_path))
        return self._session.call(lambda client: client.lsinfo())

    def show(self, path: str) -> bool:
        """List ``path`` into the window; return False if nothing changed."""
        service_path = to_service(path)
        try:
            entries = self._list(service_path)
        except ServiceError as exc:
            if exc.connection_closed:
                self._reporter.warn(f"cannot list /{service_path}: {exc}")
            else:
                logger.info("Cannot list /%s: %s", service_path, exc)
            return False
        lines = [f"current path: /{encode(service_path)}\n"]
        for entry in entries:
            name = entry.get("directory") or entry.get("file")
            if name:
                lines.append(f"{encode(leaf_name(name))}\n")
        try:
            self._window.clear_body()
            self._window.write_body("".join(lines))
        except OSError as exc:
            self._reporter.warn(f"cannot write the browse window: {exc}")
            return False
        return True
