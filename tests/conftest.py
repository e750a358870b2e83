"""Pytest configuration and shared fakes for samc."""

from __future__ import annotations

import io
from pathlib import Path
from typing import Any, Callable

import pytest
from rich.console import Console

from samc.acme import AcmeFS, Window
from samc.config import ConnectionTarget
from samc.session import Session
from samc.ui.reporter import Reporter

WINDOW_FILES = ("ctl", "tag", "body", "addr", "data", "event")


class FakeAcmeFS(AcmeFS):
    """An acme file tree in a temp directory, allocating ids on demand."""

    def __init__(self, root: Path) -> None:
        super().__init__(root)
        self.next_id = 1
        self.created: list[int] = []
        (root / "new").mkdir(parents=True, exist_ok=True)

    def new_window(self) -> Window:
        win_id = self.next_id
        self.next_id += 1
        win_dir = self.root / str(win_id)
        win_dir.mkdir()
        for name in WINDOW_FILES:
            (win_dir / name).write_text("", encoding="utf-8")
        (win_dir / "ctl").write_text(f"{win_id} 0 0 0 0 640 font 0 ", encoding="utf-8")
        (self.root / "new" / "ctl").write_text(
            f"{win_id} 0 0 0 0 640 font 0 ", encoding="utf-8"
        )
        self.created.append(win_id)
        return super().new_window()

    def read(self, win_id: int, name: str) -> str:
        return (self.root / str(win_id) / name).read_text(encoding="utf-8")

    def body(self, win_id: int) -> str:
        """Body text as acme would show it, applying backspaces."""
        shown: list[str] = []
        for rune in self.read(win_id, "body"):
            if rune == "\b":
                if shown:
                    shown.pop()
            else:
                shown.append(rune)
        return "".join(shown)

    def sync_length(self, win_id: int) -> None:
        """Make ``ctl`` report the current body length."""
        length = len(self.body(win_id))
        (self.root / str(win_id) / "ctl").write_text(
            f"{win_id} 0 {length} 0 0 640 font 0 ", encoding="utf-8"
        )

    def set_events(self, win_id: int, records: str) -> None:
        (self.root / str(win_id) / "event").write_text(records, encoding="utf-8")


class FakeMPD:
    """Scripted MPD server shared by every client it hands out."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.failures: dict[str, list[BaseException]] = {}
        self.responses: dict[str, Any] = {
            "status": {"state": "stop", "time": ""},
            "playlistinfo": [],
            "lsinfo": [],
        }
        self.connects = 0
        self.connect_failures: list[BaseException] = []
        self.passwords: list[str] = []
        self.clients: list["FakeMPDClient"] = []

    def fail(self, name: str, *errors: BaseException) -> None:
        self.failures.setdefault(name, []).extend(errors)

    def client(self) -> "FakeMPDClient":
        client = FakeMPDClient(self)
        self.clients.append(client)
        return client

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]


class FakeMPDClient:
    def __init__(self, server: FakeMPD) -> None:
        self._server = server
        self.connected = False
        self.disconnected = False

    def connect(self, host: str, port: int) -> None:
        self._server.connects += 1
        if self._server.connect_failures:
            raise self._server.connect_failures.pop(0)
        self.connected = True

    def password(self, password: str) -> None:
        self._server.passwords.append(password)

    def disconnect(self) -> None:
        self.disconnected = True

    def __getattr__(self, name: str) -> Callable[..., Any]:
        if name.startswith("_"):
            raise AttributeError(name)
        server = self._server

        def command(*args: Any) -> Any:
            pending = server.failures.get(name)
            if pending:
                raise pending.pop(0)
            server.calls.append((name, args))
            response = server.responses.get(name)
            if callable(response):
                return response(*args)
            return response

        return command


@pytest.fixture
def acme(tmp_path: Path) -> FakeAcmeFS:
    return FakeAcmeFS(tmp_path / "acme")


@pytest.fixture
def mpd_server() -> FakeMPD:
    return FakeMPD()


@pytest.fixture
def session(mpd_server: FakeMPD) -> Session:
    return Session(ConnectionTarget("mpd.test", 6600), client_factory=mpd_server.client)


@pytest.fixture
def console() -> Console:
    return Console(file=io.StringIO(), width=200, highlight=False)


@pytest.fixture
def reporter(console: Console) -> Reporter:
    return Reporter(console)
