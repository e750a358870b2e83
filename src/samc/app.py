"""The samc application: one playlist window and an optional browse window.

Each window's event file is read by its own loop; the playlist loop runs in
the calling thread for the life of the process and the browse loop in a
daemon thread for the life of the browse window.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import partial
import logging
import threading
from typing import Optional, TextIO

from samc.acme import AcmeFS, Window
from samc.commands import BrowseCommands, PlaylistCommands
from samc.events import EventDecoder
from samc.overflow import read_overflow_text
from samc.session import ServiceError, Session
from samc.songinfo import InfoLauncher
from samc.ui.reporter import Reporter
from samc.ui.views import BrowseView, PlaylistView
from samc.vpath import ROOT, to_service

logger = logging.getLogger(__name__)

PLAYLIST_NAME = "samc:"
PLAYLIST_TAGS = "Quit Clear Play Pause Stop Next Browse Refresh"
BROWSE_NAME = "browse:"
BROWSE_TAGS = "Close Update Info .."


class FatalError(RuntimeError):
    """The process cannot continue."""


@dataclass
class _BrowseWindow:
    window: Window
    view: BrowseView
    closed: threading.Event = field(default_factory=threading.Event)
    thread: Optional[threading.Thread] = None


class SamcApp:
    """Owns both windows and routes their events to the interpreters."""

    def __init__(
        self,
        fs: AcmeFS,
        session: Session,
        reporter: Reporter,
        info: InfoLauncher,
    ) -> None:
        self._fs = fs
        self._session = session
        self._reporter = reporter
        self._info = info
        self._lock = threading.RLock()
        self._quit = threading.Event()
        self._fatal: Optional[BaseException] = None
        self._torn_down = False
        self._playlist_window: Optional[Window] = None
        self._playlist_view: Optional[PlaylistView] = None
        self._browse: Optional[_BrowseWindow] = None
        self._current_path = ROOT
        self.playlist_commands = PlaylistCommands(session, self, reporter)
        self.browse_commands = BrowseCommands(session, self, reporter)

    @property
    def current_path(self) -> str:
        return self._current_path

    @property
    def browse_window(self) -> Optional[Window]:
        browse = self._browse
        return browse.window if browse is not None else None

    @property
    def quitting(self) -> bool:
        return self._quit.is_set()

    # -------- lifecycle --------

    def run(self) -> int:
        """Start up and serve the playlist window; return the exit status."""
        try:
            self.start()
        except (ServiceError, OSError) as exc:
            self._reporter.error(f"startup failed: {exc}")
            self._teardown()
            self._session.close()
            return 1
        try:
            return self.serve()
        finally:
            self._teardown()
            self._session.close()

    def start(self) -> None:
        """Connect and paint the playlist window; any failure is fatal."""
        self._session.connect()
        window = self._fs.new_window()
        self._playlist_window = window
        window.set_name(PLAYLIST_NAME)
        window.write_tag(PLAYLIST_TAGS)
        self._playlist_view = PlaylistView(window, self._session, self._reporter)
        self._playlist_view.show_playlist(fatal=True)
        self._playlist_view.show_status(replace=False, fatal=True)

    def serve(self) -> int:
        window = self._playlist_window
        if window is None:
            raise FatalError("playlist window is not open")
        try:
            with window.open_events() as stream:
                decoder = EventDecoder(stream, partial(read_overflow_text, window))
                for event in decoder:
                    self.playlist_commands.handle(event)
                    if self._quit.is_set() or self._fatal is not None:
                        break
        except OSError as exc:
            if self._quit.is_set():
                return 0
            self.abort(exc)
            return 1
        if self._quit.is_set():
            return 0
        self.abort(FatalError("the playlist window was closed"))
        return 1

    def quit(self) -> None:
        logger.info("Quit requested")
        self._quit.set()
        self._teardown()

    def abort(self, exc: BaseException) -> None:
        """Record a fatal failure and release the playlist loop."""
        with self._lock:
            if self._fatal is not None or self._quit.is_set():
                return
            self._fatal = exc
        self._reporter.error(f"fatal: {exc}")
        self._teardown()

    def _teardown(self) -> None:
        with self._lock:
            if self._torn_down:
                return
            self._torn_down = True
            window = self._playlist_window
        self.close_browser()
        if window is None:
            return
        try:
            window.delete()
        except OSError:
            logger.warning("Could not delete the playlist window", exc_info=True)

    # -------- controller interface --------

    def refresh_playlist(self, full: bool) -> None:
        view = self._playlist_view
        if view is None:
            return
        with self._lock:
            view.refresh(full)

    def open_browser(self, path: str) -> None:
        """Show ``path`` in the browse window, creating the window if needed."""
        with self._lock:
            if self._browse is None:
                try:
                    self._browse = self._create_browser()
                except OSError as exc:
                    self._reporter.warn(f"cannot open the browse window: {exc}")
                    return
        self.navigate(path)

    def navigate(self, path: str) -> bool:
        """List ``path``; the browse path only moves when the listing worked."""
        path = "/" + to_service(path)
        with self._lock:
            browse = self._browse
            if browse is None:
                return False
            if not browse.view.show(path):
                return False
            self._current_path = path
        return True

    def close_browser(self) -> None:
        with self._lock:
            browse, self._browse = self._browse, None
        if browse is None:
            return
        browse.closed.set()
        try:
            browse.window.delete()
        except OSError:
            logger.warning("Could not delete %s", browse.window, exc_info=True)

    def show_info(self, path: str) -> None:
        self._info.launch(path)

    # -------- browse window --------

    def _create_browser(self) -> _BrowseWindow:
        window = self._fs.new_window()
        try:
            window.set_name(BROWSE_NAME)
            window.write_tag(BROWSE_TAGS)
            stream = window.open_events()
        except OSError:
            window.delete()
            raise
        browse = _BrowseWindow(
            window, BrowseView(window, self._session, self._reporter)
        )
        browse.thread = threading.Thread(
            target=self._read_browse_events,
            args=(browse, stream),
            name=f"browse-{window.id}",
            daemon=True,
        )
        browse.thread.start()
        return browse

    def _browse_done(self, browse: _BrowseWindow) -> bool:
        return browse.closed.is_set() or self._quit.is_set()

    def _read_browse_events(self, browse: _BrowseWindow, stream: TextIO) -> None:
        try:
            with stream:
                decoder = EventDecoder(
                    stream, partial(read_overflow_text, browse.window)
                )
                for event in decoder:
                    if self._browse_done(browse):
                        return
                    self.browse_commands.handle(event)
                    if self._browse_done(browse):
                        return
        except OSError as exc:
            if not self._browse_done(browse):
                self.abort(exc)
            return
        if not self._browse_done(browse):
            self.abort(FatalError(f"event stream of {browse.window} ended"))
